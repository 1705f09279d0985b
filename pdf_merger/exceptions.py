"""
Custom exceptions for PDF Merger.

This module defines all custom exceptions used throughout the library.
"""


class PDFMergerException(Exception):
    """Base exception for all PDF Merger errors."""

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    @property
    def default_message(self) -> str:
        return "An unknown PDF merger error occurred."


class PDFFileNotFoundError(PDFMergerException, FileNotFoundError):
    """Raised when a document added to a merge cannot be located."""

    @property
    def default_message(self) -> str:
        return "Could not locate PDF file."


class InvalidPageSpecError(PDFMergerException):
    """Raised when a page specification string is malformed."""

    @property
    def default_message(self) -> str:
        return "Invalid page specification."


class InvalidRangeError(InvalidPageSpecError):
    """Raised when a page range runs backwards (start greater than end)."""

    @property
    def default_message(self) -> str:
        return "Starting page is greater than ending page."


class PageNotFoundError(PDFMergerException):
    """Raised when a requested page does not exist in its source document."""

    @property
    def default_message(self) -> str:
        return "Requested page does not exist in the source PDF."


class NoDocumentsAddedError(PDFMergerException):
    """Raised when a merge is requested before any document was added."""

    @property
    def default_message(self) -> str:
        return "No PDFs to merge."


class WriteFailureError(PDFMergerException):
    """Raised when the merged document cannot be written to its destination."""

    @property
    def default_message(self) -> str:
        return "Error outputting merged PDF."


class InvalidPDFError(PDFMergerException):
    """Raised when PDF file is invalid or corrupted."""

    @property
    def default_message(self) -> str:
        return "Invalid or corrupted PDF file."


class EncryptedPDFError(PDFMergerException):
    """Raised when PDF is encrypted and cannot be processed."""

    @property
    def default_message(self) -> str:
        return "PDF is encrypted and cannot be processed without a password."


class PageImportError(PDFMergerException):
    """Raised when a page's content cannot be stamped onto the output."""

    @property
    def default_message(self) -> str:
        return "Unable to import page content."


class InvalidOptionError(PDFMergerException):
    """Raised when merge options are invalid."""

    @property
    def default_message(self) -> str:
        return "Invalid merge option."
