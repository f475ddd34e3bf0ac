from __future__ import annotations

from typing import Any, Dict, List, Optional, Protocol

import asyncpg
from asyncpg import Connection, Pool, Record
from loguru import logger
from ujson import dumps, loads

from vocab_api.shared.config import DATABASE
from .errors import StoreError, WordNotFound
from .models import Word

SCHEMA = """
CREATE TABLE IF NOT EXISTS words (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    text TEXT NOT NULL,
    language TEXT NOT NULL,
    word_type TEXT,
    definitions JSONB NOT NULL DEFAULT '[]',
    examples TEXT[] NOT NULL DEFAULT '{}',
    pronunciation JSONB NOT NULL DEFAULT '{}',
    etymology TEXT NOT NULL DEFAULT '',
    translations JSONB NOT NULL DEFAULT '{}',
    synonyms TEXT[] NOT NULL DEFAULT '{}',
    antonyms TEXT[] NOT NULL DEFAULT '{}',
    search_terms TEXT[] NOT NULL DEFAULT '{}',
    lemma TEXT,
    usage_notes TEXT[] NOT NULL DEFAULT '{}',
    forms JSONB NOT NULL DEFAULT '[]',
    created_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    updated_at TIMESTAMPTZ NOT NULL DEFAULT NOW(),
    UNIQUE (text, language)
);
CREATE INDEX IF NOT EXISTS words_search_terms ON words USING GIN (search_terms);
CREATE INDEX IF NOT EXISTS words_updated_at ON words (language, updated_at DESC);
"""

FILTERABLE = ("language", "word_type", "lemma", "text")


class WordStore(Protocol):
    async def find_by_id(self, word_id: str) -> Word:
        ...

    async def find_by_text(self, text: str, language: str) -> Word:
        ...

    async def find_by_any_form(self, text: str, language: str) -> Word:
        ...

    async def save(self, word: Word) -> Word:
        ...

    async def list(
        self, filters: Dict[str, Any], limit: int = 10, offset: int = 0
    ) -> List[Word]:
        ...

    async def find_by_prefix(
        self, prefix: str, language: str, limit: int = 10
    ) -> List[Word]:
        ...

    async def find_suggestions(
        self, prefix: str, language: str, limit: int = 10
    ) -> List[str]:
        ...


async def init_connection(connection: Connection) -> None:
    await connection.set_type_codec(
        "jsonb",
        encoder=dumps,
        decoder=loads,
        schema="pg_catalog",
    )


async def create_pool(dsn: str = DATABASE.DSN) -> Pool:
    return await asyncpg.create_pool(
        dsn,
        min_size=DATABASE.MIN_SIZE,
        max_size=DATABASE.MAX_SIZE,
        init=init_connection,
    )


def escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class WordRepository:
    """PostgreSQL word store, one row per (text, language)."""

    def __init__(self, pool: Pool) -> None:
        self.pool = pool

    async def setup(self) -> None:
        await self._execute(SCHEMA)
        logger.info("Word schema is ready")

    def _to_word(self, record: Record) -> Word:
        data = dict(record)
        data["id"] = str(data["id"])
        return Word.model_validate(data)

    async def _execute(self, query: str, *args: Any) -> str:
        try:
            return await self.pool.execute(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            raise StoreError(f"query failed: {exc!r}") from exc

    async def _fetchrow(self, query: str, *args: Any) -> Optional[Record]:
        try:
            return await self.pool.fetchrow(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            raise StoreError(f"query failed: {exc!r}") from exc

    async def _fetch(self, query: str, *args: Any) -> List[Record]:
        try:
            return await self.pool.fetch(query, *args)
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as exc:
            raise StoreError(f"query failed: {exc!r}") from exc

    async def find_by_id(self, word_id: str) -> Word:
        try:
            record = await self._fetchrow(
                """
                SELECT *
                FROM words
                WHERE id = $1::UUID
                """,
                word_id,
            )
        except StoreError as exc:
            if isinstance(exc.__cause__, asyncpg.DataError):
                raise WordNotFound(f"{word_id!r} is not a word id") from exc

            raise

        if not record:
            raise WordNotFound(f"no word with id {word_id}")

        return self._to_word(record)

    async def find_by_text(self, text: str, language: str) -> Word:
        record = await self._fetchrow(
            """
            SELECT *
            FROM words
            WHERE text = $1
            AND language = $2
            """,
            text,
            language,
        )
        if not record:
            raise WordNotFound(f"{text!r} ({language}) is not stored")

        return self._to_word(record)

    async def find_by_any_form(self, text: str, language: str) -> Word:
        record = await self._fetchrow(
            """
            SELECT *
            FROM words
            WHERE $1 = ANY(search_terms)
            AND language = $2
            ORDER BY updated_at DESC
            LIMIT 1
            """,
            text,
            language,
        )
        if not record:
            raise WordNotFound(f"no stored word has the form {text!r} ({language})")

        return self._to_word(record)

    async def save(self, word: Word) -> Word:
        data = word.model_dump(mode="json", exclude={"primary_word_type"})
        record = await self._fetchrow(
            """
            INSERT INTO words (
                text,
                language,
                word_type,
                definitions,
                examples,
                pronunciation,
                etymology,
                translations,
                synonyms,
                antonyms,
                search_terms,
                lemma,
                usage_notes,
                forms,
                created_at,
                updated_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11, $12, $13, $14, $15, $16)
            ON CONFLICT (text, language) DO UPDATE
            SET word_type = EXCLUDED.word_type,
                definitions = EXCLUDED.definitions,
                examples = EXCLUDED.examples,
                pronunciation = EXCLUDED.pronunciation,
                etymology = EXCLUDED.etymology,
                translations = EXCLUDED.translations,
                synonyms = EXCLUDED.synonyms,
                antonyms = EXCLUDED.antonyms,
                search_terms = EXCLUDED.search_terms,
                lemma = EXCLUDED.lemma,
                usage_notes = EXCLUDED.usage_notes,
                forms = EXCLUDED.forms,
                updated_at = EXCLUDED.updated_at
            RETURNING id
            """,
            word.text,
            word.language,
            word.word_type,
            data["definitions"],
            word.examples,
            word.pronunciation,
            word.etymology,
            word.translations,
            word.synonyms,
            word.antonyms,
            word.search_terms,
            word.lemma,
            word.usage_notes,
            data["forms"],
            word.created_at,
            word.updated_at,
        )
        if not record:
            raise StoreError(f"upsert of {word.text!r} returned nothing")

        word.assign_id(str(record["id"]))
        logger.debug("Saved {} ({}) as {}", word.text, word.language, word.id)
        return word

    async def list(
        self, filters: Dict[str, Any], limit: int = 10, offset: int = 0
    ) -> List[Word]:
        clauses, args = [], []
        for column, value in filters.items():
            if column not in FILTERABLE:
                raise StoreError(f"{column!r} can't be filtered on")

            args.append(value)
            clauses.append(f"{column} = ${len(args)}")

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""
        args.extend((limit, offset))
        records = await self._fetch(
            f"""
            SELECT *
            FROM words
            {where}
            ORDER BY updated_at DESC
            LIMIT ${len(args) - 1}
            OFFSET ${len(args)}
            """,
            *args,
        )
        return [self._to_word(record) for record in records]

    async def find_by_prefix(
        self, prefix: str, language: str, limit: int = 10
    ) -> List[Word]:
        records = await self._fetch(
            """
            SELECT *
            FROM words
            WHERE text ILIKE $1
            AND language = $2
            ORDER BY updated_at DESC
            LIMIT $3
            """,
            f"{escape_like(prefix)}%",
            language,
            limit,
        )
        return [self._to_word(record) for record in records]

    async def find_suggestions(
        self, prefix: str, language: str, limit: int = 10
    ) -> List[str]:
        records = await self._fetch(
            """
            SELECT text
            FROM words
            WHERE text ILIKE $1
            AND language = $2
            ORDER BY updated_at DESC
            LIMIT $3
            """,
            f"{escape_like(prefix)}%",
            language,
            limit,
        )
        return [record["text"] for record in records]
