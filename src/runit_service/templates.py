"""
Run script rendering.

PURPOSE: Produce the shell script runit execs for a service.
AI CONTEXT: Pure string substitution, no I/O, so output can be golden-tested.

RENDERED SHAPE:
    #!/bin/bash
    #<description>

    exec <path> >>/var/log/<name>.log 2>&1
"""

from __future__ import annotations

from .config import Config
from .errors import TemplateError

__all__ = ["render_run_script"]


def render_run_script(
    name: str,
    description: str,
    executable_path: str,
    log_dir: str | None = None,
    template: str | None = None,
) -> str:
    """
    Render the run script for a service.

    Substitutes the service fields into RUN_SCRIPT_TEMPLATE (or a caller
    supplied template). Values are inserted verbatim; braces inside them
    are not interpreted.

    Business context: runit starts a service by executing its `run` file.
    The script execs the real binary so the supervisor tracks the service
    pid directly, and appends all output to a per-service log.

    Args:
        name: Service name, used for the log file name.
        description: Human-readable label, written as a comment line.
        executable_path: Absolute path of the program to exec.
        log_dir: Log directory. Defaults to Config.get_log_dir().
        template: Alternative template using the fields name, description,
            path and log_dir. Defaults to Config.RUN_SCRIPT_TEMPLATE.

    Returns:
        Complete script text ending in a newline.

    Raises:
        TemplateError: If the template references an unknown field or
            contains malformed format syntax.

    Example:
        >>> render_run_script('foo', 'Foo daemon', '/usr/bin/foo', '/var/log')
        '#!/bin/bash\\n#Foo daemon\\n\\nexec /usr/bin/foo >>/var/log/foo.log 2>&1\\n'
    """
    fields = {
        "name": name,
        "description": description,
        "path": executable_path,
        "log_dir": (log_dir if log_dir is not None else Config.get_log_dir()).rstrip("/"),
    }
    try:
        return (template if template is not None else Config.RUN_SCRIPT_TEMPLATE).format(
            **fields
        )
    except KeyError as e:
        raise TemplateError(f"Unknown run script field: {e.args[0]}") from e
    except (IndexError, ValueError) as e:
        raise TemplateError(f"Malformed run script template: {e}") from e
