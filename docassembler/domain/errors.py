class DocAssemblerError(Exception):
    pass


class InvalidInputError(DocAssemblerError):
    pass


class EmptySelectionError(DocAssemblerError):
    pass


class AssemblyError(DocAssemblerError):
    pass


class ValidationError(DocAssemblerError):
    pass


class ParsingError(DocAssemblerError):
    pass
