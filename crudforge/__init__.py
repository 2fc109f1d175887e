"""crudforge: generate clean-architecture CRUD building blocks for one entity.

The pipeline resolves an entity name and invocation options into a plan,
expands the plan into ordered artifact descriptors, composes each artifact
from a Jinja2 skeleton and writes (or previews) the result.
"""

from crudforge.errors import CrudForgeError
from crudforge.pipeline import GenerationResult, generate

__version__ = "0.1.0"

__all__ = ["CrudForgeError", "GenerationResult", "__version__", "generate"]
