"""Per-invocation component wiring for CLI commands."""

import typer

from playdeck.config import get_logger, settings
from playdeck.infrastructure.bootstrap import Components, build_components

logger = get_logger(__name__)


def get_components(ctx: typer.Context) -> Components:
    """Return the components for this invocation, building them on first use.

    Components placed in ``ctx.obj["components"]`` beforehand are used as
    is. Components built here are shut down when the command finishes, so
    pending writes reach disk before the process exits.
    """
    obj = ctx.ensure_object(dict)
    components = obj.get("components")
    if components is None:
        components = build_components(settings)
        obj["components"] = components
        ctx.find_root().call_on_close(components.shutdown)
        logger.debug("Built components for CLI invocation")
    return components
