#!/usr/bin/env python3
"""
HLA class I contact analysis

Classifies functionally important MHC-I positions from structural contact
data and scores how far HLA allele pairs diverge at those positions.
"""

__version__ = '0.1.0'
__license__ = 'MIT'

from .core.context import ApplicationContext
from .exceptions import HLAContactError
from .error_handlers import handle_exceptions
from .pipelines.analysis import HLAAnalysisService

__all__ = ['ApplicationContext', 'HLAContactError', 'handle_exceptions', 'HLAAnalysisService']
