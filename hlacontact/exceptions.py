#!/usr/bin/env python3
"""
Exception hierarchy for the HLA contact analysis pipeline.
All custom exceptions should inherit from HLAContactError.
"""
from typing import Dict, Any, Optional


class HLAContactError(Exception):
    """Base exception for all HLA contact analysis errors"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Initialize with error message and optional details

        Args:
            message: Error message
            details: Optional details dictionary with context
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)


class ConfigurationError(HLAContactError):
    """Error related to configuration issues"""
    pass


class ValidationError(HLAContactError):
    """Invalid analysis parameters"""
    pass


class DataUnavailableError(HLAContactError):
    """Dataset could not be loaded and no cached snapshot exists"""
    pass


class AlleleNotFoundError(HLAContactError):
    """Requested allele is absent from the sequence table"""
    pass


class MalformedRowError(HLAContactError):
    """Input row is missing required fields"""
    pass
