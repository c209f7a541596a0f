"""
Compile lifecycle for the PSQL schema compiler.

Wraps the compilation of one model (or enum) in a three-phase hook
contract:

1. ``on_start(config, model)`` may return a rewritten config and model.
2. The core compiles the (possibly rewritten) inputs.
3. ``on_success(tables)`` receives a deep copy of the produced tables and
   returns the tables to hand back. ``on_failure(config, model, error)``
   receives the current config, a deep copy of the original model and the
   error, and returns the error to raise.

Any phase failing is terminal for that compilation. Batch entry points
compile in sorted name order and stop at the first failure.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple, TypeVar

from .config import CompilerConfig
from .domain.models import Enum, Model, Table
from .domain.tables import EnumTableAssembler, Registry, TableAssembler
from .exceptions import HookError, NilTableSetError, UnexpectedTableSetError
from .registry import ModelRegistry


logger = logging.getLogger(__name__)


T = TypeVar("T")

StartHook = Callable[[CompilerConfig, T], Tuple[CompilerConfig, T]]
SuccessHook = Callable[[List[Table]], List[Table]]
FailureHook = Callable[[CompilerConfig, T, Exception], Optional[Exception]]


@dataclass
class ModelHooks:
    """Optional callbacks around one model's compilation."""

    on_start: Optional[StartHook] = None
    on_success: Optional[SuccessHook] = None
    on_failure: Optional[FailureHook] = None


@dataclass
class EnumHooks:
    """Optional callbacks around one enum's compilation."""

    on_start: Optional[StartHook] = None
    on_success: Optional[SuccessHook] = None
    on_failure: Optional[FailureHook] = None


def _call_hook(phase: str, hook: Callable, *args):
    try:
        return hook(*args)
    except HookError:
        raise
    except Exception as e:
        raise HookError(f"{phase} hook failed: {e}", phase=phase, original=e) from e


def trigger_compile_start(hooks, config: CompilerConfig, subject: T) -> Tuple[CompilerConfig, T]:
    """
    Run the start hook on deep copies of the inputs.

    Returns:
        The config and subject to compile
    """
    if hooks is None or hooks.on_start is None:
        return config, subject

    updated_config, updated_subject = _call_hook(
        "start", hooks.on_start, config.model_copy(deep=True), subject.deep_clone()
    )
    return updated_config, updated_subject


def trigger_compile_success(hooks, tables: Optional[List[Table]]) -> List[Table]:
    """
    Run the success hook on a deep copy of the produced tables.

    Raises:
        NilTableSetError: A success hook is registered but no tables exist
        HookError: The hook failed or did not return a list
    """
    if hooks is None or hooks.on_success is None:
        return tables
    if tables is None:
        raise NilTableSetError("no tables were produced for the success hook")

    tables_clone = [table.deep_clone() for table in tables]
    replaced = _call_hook("success", hooks.on_success, tables_clone)
    if not isinstance(replaced, list):
        raise HookError(
            f"success hook returned {type(replaced).__name__}, expected a list of tables",
            phase="success",
        )
    return replaced


def trigger_compile_failure(hooks, config: CompilerConfig, subject: T, error: Exception) -> Exception:
    """
    Run the failure hook and return the error to surface.

    Without a failure hook (or when it returns None) the original error is
    surfaced unchanged.
    """
    if hooks is None or hooks.on_failure is None:
        return error

    replacement = _call_hook("failure", hooks.on_failure, config, subject.deep_clone(), error)
    if replacement is None:
        return error
    if not isinstance(replacement, BaseException):
        return HookError(
            f"failure hook returned {type(replacement).__name__}, expected an exception",
            phase="failure",
        )
    return replacement


def _run_lifecycle(
    hooks,
    config: CompilerConfig,
    subject: T,
    compile_fn: Callable[[CompilerConfig, T], List[Table]],
    check_tables: Optional[Callable[[List[Table]], None]] = None,
) -> List[Table]:
    current_config = config
    try:
        current_config, current_subject = trigger_compile_start(hooks, config, subject)
        tables = compile_fn(current_config, current_subject)
        tables = trigger_compile_success(hooks, tables)
        if check_tables is not None:
            check_tables(tables)
        return tables
    except Exception as e:
        surfaced = trigger_compile_failure(hooks, current_config, subject, e)
        if surfaced is e:
            raise
        raise surfaced from e


# --- Models ---

def _compile_model(config: CompilerConfig, registry: Registry, model: Model) -> List[Table]:
    config.ensure_valid()
    assembler = TableAssembler(registry, config.schema_name, use_big_serial=config.use_big_serial)
    return assembler.assemble(model)


def compile_model_to_tables(
    config: CompilerConfig,
    registry: Registry,
    model: Model,
    hooks: Optional[ModelHooks] = None,
) -> List[Table]:
    """
    Compile one model into its table followed by its junction tables.

    Args:
        config: Compiler configuration
        registry: Read-only model and enum lookup
        model: The model to compile
        hooks: Optional lifecycle callbacks

    Returns:
        The produced tables

    Raises:
        SchemaCompilerError: Compilation failed, or whatever the failure
            hook returned in its place
    """
    logger.debug(f"Compiling model '{model.name}'")
    tables = _run_lifecycle(
        hooks,
        config,
        model,
        lambda current_config, current_model: _compile_model(current_config, registry, current_model),
    )
    logger.debug(f"Compiled model '{model.name}' into {len(tables)} tables")
    return tables


def compile_all_models(
    config: CompilerConfig,
    registry: ModelRegistry,
    hooks: Optional[ModelHooks] = None,
) -> Dict[str, List[Table]]:
    """
    Compile every model in the registry.

    Returns:
        Produced tables per model name

    Raises:
        SchemaCompilerError: The first model failure aborts the batch
    """
    all_model_tables: Dict[str, List[Table]] = {}
    models = registry.get_all_models()
    for model_name in sorted(models):
        all_model_tables[model_name] = compile_model_to_tables(config, registry, models[model_name], hooks)
    logger.info(f"Compiled {len(all_model_tables)} models")
    return all_model_tables


# --- Enums ---

def _compile_enum(config: CompilerConfig, enum: Enum) -> List[Table]:
    config.ensure_valid()
    assembler = EnumTableAssembler(config.schema_name, use_big_serial=config.use_big_serial)
    return [assembler.assemble(enum)]


def _require_single_table(tables: List[Table]) -> None:
    if len(tables) != 1:
        raise UnexpectedTableSetError(
            f"expected exactly one enum table, got {len(tables)}",
            expected=1,
            actual=len(tables),
        )


def compile_enum_to_table(
    config: CompilerConfig,
    enum: Enum,
    hooks: Optional[EnumHooks] = None,
) -> Table:
    """
    Compile one enum into its seeded backing table.

    Raises:
        UnexpectedTableSetError: A success hook did not hand back exactly
            one table
        SchemaCompilerError: Compilation failed, or whatever the failure
            hook returned in its place
    """
    logger.debug(f"Compiling enum '{enum.name}'")
    tables = _run_lifecycle(hooks, config, enum, _compile_enum, _require_single_table)
    return tables[0]


def compile_all_enums(
    config: CompilerConfig,
    registry: ModelRegistry,
    hooks: Optional[EnumHooks] = None,
) -> Dict[str, Table]:
    """
    Compile every enum in the registry.

    Raises:
        SchemaCompilerError: The first enum failure aborts the batch
    """
    all_enum_tables: Dict[str, Table] = {}
    enums = registry.get_all_enums()
    for enum_name in sorted(enums):
        all_enum_tables[enum_name] = compile_enum_to_table(config, enums[enum_name], hooks)
    logger.info(f"Compiled {len(all_enum_tables)} enums")
    return all_enum_tables
