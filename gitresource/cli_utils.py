"""
Common CLI utilities and decorators for consistent command behavior.
"""

import json
import logging
import sys
import click
from functools import wraps
from typing import IO

from .config import configure_logging, load_config
from .domain.source import Payload
from .exit_codes import (
    SUCCESS, INTERRUPTED, GitError,
    get_exit_code_for_exception, CommandError, PayloadError
)
from .output import emit, emit_error

logger = logging.getLogger(__name__)


def read_payload(stream: IO[str]) -> Payload:
    """
    Parse the pipeline engine's JSON request.

    Raises:
        PayloadError: if stdin is empty or not JSON
        ConfigError: if the JSON does not describe a valid source
    """
    raw = stream.read()
    if not raw.strip():
        raise PayloadError("expected a JSON payload on stdin")
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise PayloadError(f"invalid JSON payload: {e}")
    return Payload.from_dict(data)


def standard_command(func):
    """
    Decorator that provides standard CLI behavior:
    - Configuration loaded and logging configured once
    - Automatic --verbose/-v flag handling
    - JSON (or --pretty table) output of the returned result on stdout
    - Consistent error handling: JSON error on stderr, non-zero exit code

    The wrapped command receives a `config` keyword argument and returns
    the data to emit.
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        verbose = kwargs.get('verbose', False)
        pretty = kwargs.get('pretty', False)

        config = load_config()
        configure_logging(config, verbose=verbose)
        kwargs['config'] = config

        try:
            result = func(*args, **kwargs)
            if result is not None:
                emit(result, pretty=pretty)
            sys.exit(SUCCESS)

        except KeyboardInterrupt:
            logger.error("Interrupted by user")
            sys.exit(INTERRUPTED)
        except click.ClickException:
            raise
        except CommandError as e:
            logger.error(str(e))
            context = None
            if isinstance(e, GitError) and e.command:
                context = {'command': ' '.join(e.command)}
            emit_error(str(e), type=type(e).__name__, exit_code=e.exit_code, context=context)
            sys.exit(e.exit_code)
        except Exception as e:
            logger.error(f"Command failed: {e}")
            code = get_exit_code_for_exception(e)
            emit_error(str(e), type=type(e).__name__, exit_code=code)
            sys.exit(code)

    return wrapper


# Standard options that every command shares
common_options = {
    'verbose': click.option('-v', '--verbose', is_flag=True,
                            help='Log debug output to stderr'),
    'pretty': click.option('--pretty', is_flag=True,
                           help='Render a table instead of JSON'),
}


def add_common_options(*option_names):
    """
    Decorator to add common options to a command.

    Example:
        @add_common_options('verbose', 'pretty')
        def my_command(verbose, pretty):
            ...
    """
    def decorator(func):
        for name in reversed(option_names):
            if name in common_options:
                func = common_options[name](func)
        return func
    return decorator
