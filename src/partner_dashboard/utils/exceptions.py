"""
Custom exception classes
"""
from fastapi import HTTPException, status


class SheetsAPIError(HTTPException):
    """Exception raised when a spreadsheet API call fails"""
    def __init__(self, detail: str, status_code: int = status.HTTP_502_BAD_GATEWAY):
        super().__init__(status_code=status_code, detail=detail)


class GeocodingError(HTTPException):
    """Exception raised when the geocoding service answers with an error"""
    def __init__(self, detail: str, status_code: int = status.HTTP_502_BAD_GATEWAY):
        super().__init__(status_code=status_code, detail=detail)


class ConfigurationError(HTTPException):
    """Exception raised when a required setting is missing"""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=detail)


class InvalidRequestError(HTTPException):
    """Exception raised for request payloads that fail business validation"""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class NotFoundError(HTTPException):
    """Exception raised when no matching row or location exists"""
    def __init__(self, detail: str):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)
