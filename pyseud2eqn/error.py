# error.py


class EqnError(Exception):
    def __init__(self, message, code="9999", equation=None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.equation = equation

    def __str__(self):
        return self.message

class ParseError(EqnError):
    def __init__(self, message, code="3000", equation=None, column=None):
        super().__init__(message, code=code, equation=equation)
        self.column = column

class ConfigError(EqnError):
    pass



Error_Dictionary = {

    "3" : "Parser Error",
    "5" : "Configuration Error",
    "9" : "Unexpected Error"

}

#Error Messages are structured in:
# 1. Digit: Main Error
# 2. Digit: Specification
# 3. and 4. Digit: Error Number



ERROR_MESSAGES = {
    "3000" : "Unexpected character: ", # + Character
    "3001" : "Unexpected token: ", # + Token
    "3002" : "Unexpected end of input.",
    "3003" : "Missing ')'. ",
    "3004" : "More than one '.' in one number.",
    "3005" : "Missing unit after ':'.",
    "3006" : "Empty equation.",
    "3007" : "Missing operand after operator: ", # + Operator
    "3008" : "Invalid directive: ", # + Directive

    "5000" : "Unknown option: ", # + Option
    "5001" : "Invalid value for option: ", # + Option
    "5002" : "Settings file could not be read: ", # + Path

    "9999" : "Unexpected Error: " #+error
}


def describe(code):
    """Return the table message for a code, or the area name as a fallback."""
    if code in ERROR_MESSAGES:
        return ERROR_MESSAGES[code]
    return Error_Dictionary.get(str(code)[:1], Error_Dictionary["9"])
