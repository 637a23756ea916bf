"""pyseud2eqn: shorthand equations to eqn markup, with autocalc."""

__version__ = "0.3.0"
