"""Exception hierarchy for template conversion and packaging."""

from typing import Optional


class TemplateError(Exception):
    """Base class for all PDFCore template errors."""

    pass


class FormatError(TemplateError):
    """
    A required package member or node field is missing or malformed.

    Attributes:
        message: Error description
        member: Archive member involved (e.g., 'layout.json'), if any
    """

    def __init__(self, message: str, member: Optional[str] = None):
        self.message = message
        self.member = member

        parts = [message]
        if member:
            parts.append(f"(member: {member})")

        super().__init__(" ".join(parts))


class ParseError(TemplateError):
    """
    A package member could not be decoded as JSON.

    Attributes:
        member: Name of the offending archive member
        original_error: The underlying decode error
    """

    def __init__(self, member: str, original_error: Optional[Exception] = None):
        self.member = member
        self.original_error = original_error

        parts = [f"Could not parse package member '{member}'"]
        if original_error:
            parts.append(f"Original error: {original_error}")

        super().__init__("\n".join(parts))


class PackageError(TemplateError):
    """The archive itself is unreadable or corrupt."""

    pass


class UnsupportedTypeError(TemplateError):
    """
    A node type tag outside the closed node set was encountered.

    Conversion degrades the offending subtree to nothing; siblings continue.

    Attributes:
        type_name: The unrecognized type tag
    """

    def __init__(self, type_name: Optional[str], context: str = "conversion"):
        self.type_name = type_name
        self.context = context
        super().__init__(f"Unsupported node type {type_name!r} during {context}")


class AssetError(TemplateError):
    """
    An Image reference could not be resolved to embeddable content.

    Non-fatal: the importer renders a placeholder and keeps the reference.

    Attributes:
        src: The unresolved logical name or source
    """

    def __init__(self, src: str, reason: str = "no embeddable reference"):
        self.src = src
        self.reason = reason
        super().__init__(f"Unresolved asset {src!r}: {reason}")
