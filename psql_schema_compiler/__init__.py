"""
PSQL schema compiler.

Translates declarative domain models (typed fields, enums, identifiers and
relations) into PostgreSQL table definitions with deterministic names.
"""

from .compiler import (
    ModelHooks,
    EnumHooks,
    compile_model_to_tables,
    compile_all_models,
    compile_enum_to_table,
    compile_all_enums
)
from .config import CompilerConfig, load_config
from .registry import ModelRegistry, load_registry

__version__ = "0.1.0"

__all__ = [
    'ModelHooks',
    'EnumHooks',
    'compile_model_to_tables',
    'compile_all_models',
    'compile_enum_to_table',
    'compile_all_enums',
    'CompilerConfig',
    'load_config',
    'ModelRegistry',
    'load_registry'
]
