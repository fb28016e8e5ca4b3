class TableDefinitionError(Exception):
    """
    Base exception for all table definition errors
    """
    pass


class InvalidArgumentError(TableDefinitionError, ValueError):
    """
    Raised when a wire resource or a value carries an argument
    outside its recognized set (partitioning type, field type, ...)
    """
    pass
