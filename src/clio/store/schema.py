"""SQLite schema and queries for the command store.

The FTS table is written only by the triggers on ``commands``.
"""

CREATE_COMMANDS_TABLE = """
    CREATE TABLE IF NOT EXISTS commands (
        id VARCHAR(36) PRIMARY KEY,
        name VARCHAR(64) NOT NULL,
        description VARCHAR(255) NOT NULL DEFAULT '',
        template VARCHAR(255) NOT NULL
    )
"""

CREATE_PARAMETERS_TABLE = """
    CREATE TABLE IF NOT EXISTS parameters (
        id VARCHAR(36) PRIMARY KEY,
        command_id VARCHAR(36) NOT NULL,
        name VARCHAR(64) NOT NULL,
        description VARCHAR(255) NOT NULL DEFAULT '',
        default_value VARCHAR(255) NOT NULL DEFAULT '',
        position INTEGER NOT NULL DEFAULT 0,

        CONSTRAINT fk_parameters_command
            FOREIGN KEY (command_id)
            REFERENCES commands(id)
            ON DELETE CASCADE
    )
"""

CREATE_SEARCH_TABLE = """
    CREATE VIRTUAL TABLE IF NOT EXISTS commands_fts
    USING fts5(id UNINDEXED, name, template, description, tokenize = 'trigram')
"""

CREATE_NOTEBOOK_TABLE = """
    CREATE TABLE IF NOT EXISTS notebook (
        command_id VARCHAR(36) PRIMARY KEY,
        explanation_blob TEXT NOT NULL,

        CONSTRAINT fk_notebook_command
            FOREIGN KEY (command_id)
            REFERENCES commands(id)
            ON DELETE CASCADE
    )
"""

CREATE_HISTORY_TABLE = """
    CREATE TABLE IF NOT EXISTS history (
        command_id VARCHAR(36) NOT NULL,
        usage_text TEXT NOT NULL,
        timestamp TEXT NOT NULL,

        CONSTRAINT fk_history_command
            FOREIGN KEY (command_id)
            REFERENCES commands(id)
            ON DELETE CASCADE
    )
"""

CREATE_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_parameters_command ON parameters(command_id)",
    "CREATE INDEX IF NOT EXISTS idx_history_command ON history(command_id, timestamp)",
]

INSERT_COMMAND_FTS_TRIGGER = """
    CREATE TRIGGER IF NOT EXISTS insert_command_fts_trigger
        AFTER INSERT ON commands
    BEGIN
        INSERT INTO commands_fts (id, name, template, description)
        VALUES (NEW.id, NEW.name, NEW.template, NEW.description);
    END
"""

UPDATE_COMMAND_FTS_TRIGGER = """
    CREATE TRIGGER IF NOT EXISTS update_command_fts_trigger
        AFTER UPDATE ON commands
    BEGIN
        UPDATE commands_fts
        SET
            name = NEW.name,
            template = NEW.template,
            description = NEW.description
        WHERE id = NEW.id;
    END
"""

DELETE_COMMAND_FTS_TRIGGER = """
    CREATE TRIGGER IF NOT EXISTS delete_command_fts_trigger
        AFTER DELETE ON commands
    BEGIN
        DELETE FROM commands_fts WHERE id = OLD.id;
    END
"""

# Canonical DDL sequence, executed in one transaction at startup
ALL_DDL = [
    CREATE_COMMANDS_TABLE,
    CREATE_PARAMETERS_TABLE,
    CREATE_SEARCH_TABLE,
    CREATE_NOTEBOOK_TABLE,
    CREATE_HISTORY_TABLE,
    *CREATE_INDEXES,
    INSERT_COMMAND_FTS_TRIGGER,
    UPDATE_COMMAND_FTS_TRIGGER,
    DELETE_COMMAND_FTS_TRIGGER,
]

UPSERT_COMMAND = """
    INSERT INTO commands (id, name, description, template)
    VALUES (?, ?, ?, ?)
    ON CONFLICT (id) DO UPDATE SET
        name = excluded.name,
        description = excluded.description,
        template = excluded.template
"""

# Values clause is filled with one "(?, ?, ?, ?, ?, ?)" group per parameter
UPSERT_PARAMETERS_PARTIAL = """
    INSERT INTO parameters (id, command_id, name, description, default_value, position)
    VALUES {values}
    ON CONFLICT (id) DO UPDATE SET
        name = excluded.name,
        description = excluded.description,
        default_value = excluded.default_value,
        position = excluded.position
"""

SELECT_ALL_COMMANDS = """
    SELECT id, name, description, template
    FROM commands
"""

SELECT_COMMAND_BY_ID = """
    SELECT id, name, description, template
    FROM commands
    WHERE id = ?
"""

SELECT_PARAMETERS_BY_COMMAND = """
    SELECT id, name, description, default_value
    FROM parameters
    WHERE command_id = ?
    ORDER BY position, rowid
"""

SEARCH_COMMANDS = """
    SELECT c.id, c.name, c.description, c.template
    FROM commands_fts fts
    INNER JOIN commands c ON c.id = fts.id
    WHERE commands_fts MATCH ?
    ORDER BY bm25(commands_fts, 0, 15, 10, 5)
"""

# Terms shorter than one trigram; :pattern is a LIKE pattern escaped with "\"
SEARCH_COMMANDS_SHORT = r"""
    SELECT id, name, description, template
    FROM commands
    WHERE name LIKE :pattern ESCAPE '\'
        OR template LIKE :pattern ESCAPE '\'
        OR description LIKE :pattern ESCAPE '\'
    ORDER BY
        CASE
            WHEN name LIKE :pattern ESCAPE '\' THEN 0
            WHEN template LIKE :pattern ESCAPE '\' THEN 1
            ELSE 2
        END,
        name
"""

DELETE_COMMAND = "DELETE FROM commands WHERE id = ?"

DELETE_PARAMETERS_PARTIAL = "DELETE FROM parameters WHERE id IN ({placeholders})"

UPSERT_EXPLANATION = """
    INSERT INTO notebook (command_id, explanation_blob)
    VALUES (?, ?)
    ON CONFLICT (command_id) DO UPDATE SET
        explanation_blob = excluded.explanation_blob
"""

SELECT_EXPLANATION = """
    SELECT explanation_blob
    FROM notebook
    WHERE command_id = ?
"""

DELETE_EXPLANATION = "DELETE FROM notebook WHERE command_id = ?"

INSERT_USAGE = """
    INSERT INTO history (command_id, usage_text, timestamp)
    VALUES (?, ?, ?)
"""

SELECT_HISTORY = """
    SELECT usage_text, timestamp
    FROM history
    WHERE command_id = ?
    ORDER BY timestamp DESC, rowid DESC
    LIMIT ?
"""
