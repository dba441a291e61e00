"""
Custom error classes for the chunk store pipeline.

Provides structured error handling with error codes,
detail information, and proper exception chaining.
"""

from typing import Optional, Dict, Any


class ChunkStoreError(Exception):
    """Base exception for chunk store errors."""
    
    def __init__(
        self,
        message: str,
        error_code: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert error to dictionary."""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(ChunkStoreError):
    """Error raised when a request fails validation."""
    
    def __init__(
        self,
        message: str,
        field: Optional[str] = None,
        value: Optional[Any] = None,
        error_code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details or {}
        )
        self.field = field
        self.value = value
        
        if field:
            self.details["field"] = field
        if value is not None:
            self.details["value"] = str(value)


class InvalidAnalysisRequestError(ValidationError):
    """Error raised for unknown analysis types or malformed parameters."""
    
    def __init__(
        self,
        message: str,
        analysis: Optional[str] = None,
        params: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            field="analysis",
            value=analysis,
            error_code="INVALID_ANALYSIS_REQUEST",
            details=details
        )
        self.analysis = analysis
        self.params = params
        
        if params is not None:
            self.details["params"] = list(params)


class StorageError(ChunkStoreError):
    """Error raised when document store operations fail."""
    
    def __init__(
        self,
        message: str,
        operation: Optional[str] = None,
        error_code: str = "STORAGE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code=error_code,
            details=details or {}
        )
        self.operation = operation
        
        if operation:
            self.details["operation"] = operation


class RetrievalError(StorageError):
    """Error raised when fetching a page of records fails."""
    
    def __init__(
        self,
        message: str,
        offset: Optional[int] = None,
        limit: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            operation="query",
            error_code="RETRIEVAL_ERROR",
            details=details
        )
        self.offset = offset
        self.limit = limit
        
        if offset is not None:
            self.details["offset"] = offset
        if limit is not None:
            self.details["limit"] = limit


class CodecError(ChunkStoreError):
    """Error raised when a record cannot be encoded or decoded."""
    
    def __init__(
        self,
        message: str,
        codec: Optional[str] = None,
        field: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="CODEC_ERROR",
            details=details or {}
        )
        self.codec = codec
        self.field = field
        
        if codec:
            self.details["codec"] = codec
        if field:
            self.details["field"] = field


class ConfigurationError(ChunkStoreError):
    """Error raised when configuration is invalid."""
    
    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        config_value: Optional[Any] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            message=message,
            error_code="CONFIGURATION_ERROR",
            details=details or {}
        )
        self.config_key = config_key
        self.config_value = config_value
        
        if config_key:
            self.details["config_key"] = config_key
        if config_value is not None:
            self.details["config_value"] = str(config_value)
