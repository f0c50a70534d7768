#!/usr/bin/env python3
"""
Exit codes and error reporting for the hlacontact command line.

Failures map onto the analysis error taxonomy:

* bad parameters or configuration -> EXIT_USAGE
* a dataset failed to load and no cached copy exists -> EXIT_DATA_UNAVAILABLE
* any other HLAContactError (e.g. an unknown allele) -> EXIT_ERROR
* anything else -> EXIT_UNEXPECTED
"""
import sys
import traceback
import logging
from functools import wraps
from typing import Callable, TypeVar, Any, Dict, Optional, Union

from .exceptions import ConfigurationError, DataUnavailableError, HLAContactError, ValidationError

T = TypeVar('T')

EXIT_ERROR = 1
EXIT_USAGE = 2
EXIT_DATA_UNAVAILABLE = 3
EXIT_UNEXPECTED = 4
EXIT_INTERRUPTED = 130


def exit_code_for(error: BaseException) -> int:
    """Process exit code for *error*"""
    if isinstance(error, KeyboardInterrupt):
        return EXIT_INTERRUPTED
    if isinstance(error, (ValidationError, ConfigurationError)):
        return EXIT_USAGE
    if isinstance(error, DataUnavailableError):
        return EXIT_DATA_UNAVAILABLE
    if isinstance(error, HLAContactError):
        return EXIT_ERROR
    return EXIT_UNEXPECTED


def format_error(error: Exception, verbose: bool = False) -> str:
    """Format an error message for display

    Args:
        error: Exception object
        verbose: Whether to include detailed information

    Returns:
        Formatted error message
    """
    if isinstance(error, DataUnavailableError):
        msg = f"{error.__class__.__name__}: {error.message}"
        source = error.details.get('source') or error.details.get('dataset')
        if source:
            msg += f"\nNo cached copy of {source} is available; check the 'data' section of the configuration"
        if verbose:
            msg += f"\nDetails: {error.details}"
        return msg
    if isinstance(error, HLAContactError):
        msg = f"{error.__class__.__name__}: {error.message}"
        if verbose and error.details:
            msg += f"\nDetails: {error.details}"
        return msg
    if verbose:
        return f"Unexpected Error ({error.__class__.__name__}): {str(error)}\n{traceback.format_exc()}"
    return f"Unexpected Error: {str(error)}"


def log_exception(logger: logging.Logger,
                  error: Exception,
                  level: int = logging.ERROR,
                  context: Optional[Dict[str, Any]] = None) -> None:
    """Log an exception with its details merged into *context*

    Expected failures (HLAContactError) are logged without a traceback.
    """
    if isinstance(error, HLAContactError):
        ctx = {**(error.details or {}), **(context or {})}
        logger.log(level, f"{error.__class__.__name__}: {error.message}",
                   extra={"context": ctx} if ctx else None)
    else:
        logger.log(level, f"Unexpected error: {str(error)}",
                   extra={"context": context} if context else None,
                   exc_info=True)


def handle_exceptions(exit_on_error: bool = False) -> Callable[[Callable[..., T]], Callable[..., Union[T, int]]]:
    """Decorator turning failures of a command function into exit codes

    Args:
        exit_on_error: Call sys.exit with the code instead of returning it

    Returns:
        Decorated function
    """
    def decorator(func: Callable[..., T]) -> Callable[..., Union[T, int]]:
        @wraps(func)
        def wrapper(*args, **kwargs) -> Union[T, int]:
            logger = logging.getLogger(func.__module__)
            try:
                return func(*args, **kwargs)
            except KeyboardInterrupt:
                logger.info("Operation cancelled by user")
                print("\nOperation cancelled by user", file=sys.stderr)
                code = EXIT_INTERRUPTED
            except Exception as e:
                code = exit_code_for(e)
                log_exception(logger, e, context={'exit_code': code})
                print(format_error(e), file=sys.stderr)
                if code == EXIT_UNEXPECTED:
                    print("See log for details. Run with --verbose for more information.", file=sys.stderr)
            if exit_on_error:
                sys.exit(code)
            return code
        return wrapper
    return decorator
