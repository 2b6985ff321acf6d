"""
Utilities package initialization.
Exports request validation functions.
"""

from .request_validator import as_json_object, validate_credentials, validate_top_k

__all__ = ['as_json_object', 'validate_credentials', 'validate_top_k']
