"""Application context built from configuration.

Wires the store, the explanation source and the manager together for one
CLI invocation.
"""

import logging
from dataclasses import dataclass, field

from clio.command.manager import CommandManager
from clio.config import ensure_data_dir, get_config
from clio.config.defaults import DEFAULT_LOG_FILENAME
from clio.config.schema import ClioConfig, ProfessorType
from clio.injector import TerminalInjector
from clio.professor import ExplanationSource, MockSource, OpenAISource
from clio.store import SQLiteStore
from clio.utils.logging import get_logger, setup_logging


@dataclass
class AppContext:
    """Everything a CLI command needs."""

    config: ClioConfig
    store: SQLiteStore
    manager: CommandManager
    injector: TerminalInjector = field(default_factory=TerminalInjector)

    def close(self) -> None:
        self.store.close()

    def __enter__(self) -> "AppContext":
        return self

    def __exit__(self, exc_type: object, exc_val: object, exc_tb: object) -> None:
        self.close()


def create_source(
    config: ClioConfig | None = None,
    logger: logging.Logger | None = None,
) -> ExplanationSource | None:
    """Create the explanation source from configuration.

    Returns:
        The configured source, or None when explanations are disabled or
        the source is missing its settings.
    """
    if config is None:
        config = get_config()
    logger = logger or get_logger(__name__)

    professor = config.professor
    if not professor.enabled:
        return None

    openai_config = professor.openai
    if professor.type == ProfessorType.MOCK:
        return MockSource(instructions=openai_config.custom_prompt)

    if professor.type == ProfessorType.OPENAI:
        if not openai_config.key:
            logger.warning("professor enabled but no openai key configured")
            return None
        return OpenAISource(
            api_key=openai_config.key,
            model=openai_config.model,
            base_url=openai_config.url,
            instructions=openai_config.custom_prompt,
            timeout=openai_config.timeout,
            logger=logger,
        )

    logger.warning("unknown professor type %s", professor.type)
    return None


def create_context(config: ClioConfig | None = None) -> AppContext:
    """Create a fully wired AppContext.

    Creates the data directory, configures logging into it, opens the store
    and builds the manager.

    Raises:
        ConfigError: If the data directory cannot be created.
        StoreUnavailableError: If the database cannot be opened.
    """
    if config is None:
        config = get_config()

    data_dir = ensure_data_dir(config)
    setup_logging(debug=config.debug, log_file=data_dir / DEFAULT_LOG_FILENAME)
    logger = get_logger("clio.cli")

    store = SQLiteStore(data_dir, logger=get_logger("clio.store"))
    manager = CommandManager(
        store,
        create_source(config, logger),
        logger=get_logger("clio.manager"),
    )
    return AppContext(config=config, store=store, manager=manager)
