# main.py
""""" Entry point for the pyseud2eqn filter.

   Responsibilities:
   - Load configuration and run the document filter on stdin or files
   - Keep this thin: the filter owns the line loop

   Usage: python main.py [--style TenExp] [--debug] < doc.ms | groff -e -ms
"""""
import sys

from pyseud2eqn import Filter


if __name__ == "__main__":
    sys.exit(Filter.main())
