class OutputBuilderError(Exception):
    """Base class for transaction output builder errors"""
    pass

class AddressMissing(OutputBuilderError):
    """Raised when advancing a draft output that has no address"""
    pass

class AmountMissing(OutputBuilderError):
    """Raised when building an output whose value was never set"""
    pass

class MinAdaError(OutputBuilderError):
    """Raised when the minimum lovelace of an output cannot be evaluated"""
    pass

class InvalidUnitError(OutputBuilderError):
    """Raised for a malformed asset unit or quantity"""
    pass

class InvalidAmountError(OutputBuilderError):
    """Raised for a coin or asset quantity outside the ledger's range"""
    pass
