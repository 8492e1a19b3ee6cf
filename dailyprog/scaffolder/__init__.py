"""dailyprog scaffolder -- turns catalog templates into project directories.

Quick usage::

    from dailyprog.scaffolder import ProjectGenerator, ResourceResolver
    from dailyprog.scaffolder.catalog import parse_catalog, parse_user_profile

    resolver = ResourceResolver()
    catalog = parse_catalog(resolver.resolve("templates.json"))
    profile = parse_user_profile(resolver.resolve("user-config.json"))
    result = ProjectGenerator(catalog, profile, resolver).materialize(
        "go", "basic", "myproject", Path("~/dailyprog").expanduser()
    )
"""

from dailyprog.scaffolder.allocator import allocate
from dailyprog.scaffolder.catalog import Catalog, UserProfile, parse_catalog, parse_user_profile
from dailyprog.scaffolder.generator import MaterializeResult, ProjectGenerator
from dailyprog.scaffolder.resources import ResourceResolver, export_bundled_resources
from dailyprog.scaffolder.templates import RenderContext, TemplateRenderer

__all__ = [
    "Catalog",
    "MaterializeResult",
    "ProjectGenerator",
    "RenderContext",
    "ResourceResolver",
    "TemplateRenderer",
    "UserProfile",
    "allocate",
    "export_bundled_resources",
    "parse_catalog",
    "parse_user_profile",
]
