"""Vulture whitelist: names used only via introspection or by frameworks."""

# Typer calls completion callbacks with (ctx, args, incomplete) by name
ctx  # type: ignore[name-defined]  # noqa: B018
args  # type: ignore[name-defined]  # noqa: B018

# Registered through decorators inside register()
list_issues  # type: ignore[name-defined]  # noqa: B018
get_issue  # type: ignore[name-defined]  # noqa: B018
edit_issue  # type: ignore[name-defined]  # noqa: B018
clear_cache  # type: ignore[name-defined]  # noqa: B018
_global_options  # type: ignore[name-defined]  # noqa: B018

# CacheStore protocol members
get  # type: ignore[name-defined]  # noqa: B018

# Mock setup in tests configures behavior through these attributes
_.return_value  # type: ignore[name-defined]  # noqa: B018
_.side_effect  # type: ignore[name-defined]  # noqa: B018
