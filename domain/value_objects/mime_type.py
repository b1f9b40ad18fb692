from enum import Enum


class MimeType(str, Enum):
    """Represent content types assigned to mirrored files."""

    TEXT = "text/plain"
    HTML = "text/html"
    CSS = "text/css"
    CSV = "text/csv"
    RASI = "text/rasi"
    QML = "text/x-qml"

    JAVASCRIPT = "application/javascript"
    JSON = "application/json"
    XML = "application/xml"
    PDF = "application/pdf"
    SHELL = "application/x-sh"

    PNG = "image/png"
    JPEG = "image/jpeg"
    GIF = "image/gif"
    SVG = "image/svg+xml"

    @classmethod
    def from_extension(cls, extension: str) -> "MimeType":
        """Look up an extension (without the dot), falling back to plain text."""
        return EXTENSION_MIME_TYPES.get(extension.lower(), cls.TEXT)

    @classmethod
    def from_filename(cls, filename: str) -> "MimeType":
        """Classify a filename by the text after its final dot."""
        if "." not in filename:
            return cls.TEXT
        return cls.from_extension(filename.rsplit(".", 1)[-1])


EXTENSION_MIME_TYPES: dict[str, MimeType] = {
    "txt": MimeType.TEXT,
    "html": MimeType.HTML,
    "css": MimeType.CSS,
    "js": MimeType.JAVASCRIPT,
    "json": MimeType.JSON,
    "png": MimeType.PNG,
    "jpg": MimeType.JPEG,
    "jpeg": MimeType.JPEG,
    "gif": MimeType.GIF,
    "pdf": MimeType.PDF,
    "svg": MimeType.SVG,
    "sh": MimeType.SHELL,
    "conf": MimeType.TEXT,
    "rasi": MimeType.RASI,
    "qml": MimeType.QML,
    "csv": MimeType.CSV,
    "xml": MimeType.XML,
}
