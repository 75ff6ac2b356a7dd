import os
import re
import tempfile
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from src.core.exceptions import RecordFormatError, StorageError
from src.core.logger import get_logger
from src.integrations.news.models import NewsItem

logger = get_logger(__name__)

HEADER = """export interface NewsItem {
  id: number;
  title: string;
  date: string;
  description: string;
  image: string;
  fullText: string;
  media?: string[];
}

"""
PROLOGUE = 'export const newsConfig: NewsItem[] = ['
CLOSING = '];'
PLACEHOLDER = '  // News items are added here automatically from the admin panel'

REQUIRED_FIELDS = ('id', 'title', 'date', 'description', 'image', 'fullText')
OPTIONAL_FIELDS = ('media',)

_ESCAPES = str.maketrans({
    '\\': '\\\\',
    "'": "\\'",
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
})
_UNESCAPES = {'n': '\n', 'r': '\r', 't': '\t'}

_NUMBER_RE = re.compile(r'-?\d+(?:\.\d+)?')
_IDENT_RE = re.compile(r'[A-Za-z_$][\w$]*')


def quote(value: str) -> str:
    """Render a string as a single-quoted literal."""
    return "'" + value.translate(_ESCAPES) + "'"


class _Scanner:
    """Reads the array literal that follows the prologue."""

    def __init__(self, text: str, pos: int = 0):
        self.text = text
        self.pos = pos

    def error(self, reason: str) -> RecordFormatError:
        line = self.text.count('\n', 0, self.pos) + 1
        return RecordFormatError(f'News store is corrupt at line {line}: {reason}')

    def skip_blank(self):
        """Skip whitespace and comments."""
        text = self.text
        while self.pos < len(text):
            if text[self.pos].isspace():
                self.pos += 1
            elif text.startswith('//', self.pos):
                end = text.find('\n', self.pos)
                self.pos = len(text) if end == -1 else end + 1
            elif text.startswith('/*', self.pos):
                end = text.find('*/', self.pos + 2)
                if end == -1:
                    raise self.error('unterminated comment')
                self.pos = end + 2
            else:
                break

    def peek(self) -> str:
        self.skip_blank()
        return self.text[self.pos] if self.pos < len(self.text) else ''

    def expect(self, char: str):
        if self.peek() != char:
            raise self.error(f'expected "{char}"')
        self.pos += 1

    def read_string(self) -> str:
        delimiter = self.text[self.pos]
        self.pos += 1
        chars = []
        while self.pos < len(self.text):
            char = self.text[self.pos]
            self.pos += 1
            if char == delimiter:
                return ''.join(chars)
            if char == '\n':
                break
            if char == '\\':
                if self.pos >= len(self.text):
                    break
                escaped = self.text[self.pos]
                self.pos += 1
                chars.append(_UNESCAPES.get(escaped, escaped))
            else:
                chars.append(char)
        raise self.error('unterminated string')

    def read_key(self) -> str:
        char = self.peek()
        if char in ('"', "'"):
            return self.read_string()
        match = _IDENT_RE.match(self.text, self.pos)
        if not match:
            raise self.error('expected a field name')
        self.pos = match.end()
        return match.group()

    def read_value(self) -> Any:
        char = self.peek()
        if char == '{':
            return self.read_object()
        if char == '[':
            return self.read_list(']')
        if char in ('"', "'"):
            return self.read_string()
        match = _NUMBER_RE.match(self.text, self.pos)
        if match:
            self.pos = match.end()
            literal = match.group()
            return float(literal) if '.' in literal else int(literal)
        raise self.error('unexpected value')

    def read_object(self) -> list[tuple[str, Any]]:
        """Object as (key, value) pairs in source order."""
        self.expect('{')
        pairs = []
        while self.peek() != '}':
            key = self.read_key()
            self.expect(':')
            pairs.append((key, self.read_value()))
            if self.peek() == ',':
                self.pos += 1
            elif self.peek() != '}':
                raise self.error('expected "," or "}"')
        self.pos += 1
        return pairs

    def read_list(self, closing: str) -> list[Any]:
        self.expect('[')
        return self.read_items(closing)

    def read_items(self, closing: str) -> list[Any]:
        items = []
        while self.peek() != closing:
            if not self.peek():
                raise self.error(f'missing "{closing}"')
            items.append(self.read_value())
            if self.peek() == ',':
                self.pos += 1
            elif self.peek() != closing:
                raise self.error(f'expected "," or "{closing}"')
        self.pos += 1
        return items


def _to_item(pairs: Any) -> NewsItem:
    """Build a NewsItem from parsed object pairs, enforcing field order."""
    if not isinstance(pairs, list) or not all(isinstance(p, tuple) for p in pairs):
        raise RecordFormatError('record is not an object')

    keys = tuple(key for key, _ in pairs)
    if keys not in (REQUIRED_FIELDS, REQUIRED_FIELDS + OPTIONAL_FIELDS):
        raise RecordFormatError(f'unexpected fields {", ".join(keys)}')

    fields = dict(pairs)
    if type(fields['id']) is not int:
        raise RecordFormatError('id is not an integer')
    for name in REQUIRED_FIELDS[1:]:
        if not isinstance(fields[name], str):
            raise RecordFormatError(f'{name} is not a string')

    media = fields.get('media')
    if media is not None:
        if not isinstance(media, list) or not all(isinstance(path, str) for path in media):
            raise RecordFormatError('media is not a list of strings')
        fields['media'] = [path.strip() for path in media]

    try:
        return NewsItem(**fields)
    except PydanticValidationError as e:
        raise RecordFormatError(f'invalid record: {e.errors()[0]["msg"]}') from e


class RecordStore:
    """
    Reads and writes news items kept in a generated TypeScript module.

    The module holds a fixed interface declaration followed by an array
    literal. Strings are single-quoted and escaped, so any text survives a
    write/read cycle.
    """

    def __init__(self, path: str | Path, strict: bool = False):
        """
        Initialize store.

        Args:
            path: Location of the store file
            strict: Raise on corrupt content instead of skipping it
        """
        self.path = Path(path)
        self.strict = strict

    def _reject(self, error: RecordFormatError, strict: bool):
        if strict:
            raise error
        logger.warning(f'Skipping corrupt news record: {error.message}')

    def parse(self, text: str, strict: bool | None = None) -> list[NewsItem]:
        """
        Parse store text into news items.

        Args:
            text: Full content of the store file
            strict: Override the store-wide strictness for this call

        Returns:
            News items in file order; empty if the array is missing or empty
        """
        strict = self.strict if strict is None else strict
        start = text.find(PROLOGUE)
        if start == -1:
            self._reject(RecordFormatError('news array not found'), strict)
            return []

        scanner = _Scanner(text, start + len(PROLOGUE))
        items: list[NewsItem] = []
        seen_ids: set[int] = set()

        try:
            raw_records = scanner.read_items(']')
            if scanner.peek() != ';':
                raise scanner.error('missing closing marker')
        except RecordFormatError as e:
            self._reject(e, strict)
            return []

        for raw in raw_records:
            try:
                item = _to_item(raw)
                if item.id in seen_ids:
                    raise RecordFormatError(f'duplicate id {item.id}')
            except RecordFormatError as e:
                self._reject(e, strict)
                continue
            seen_ids.add(item.id)
            items.append(item)

        return items

    @staticmethod
    def _render(item: NewsItem) -> str:
        media = ''
        if item.media:
            media = ', media: [' + ', '.join(quote(path) for path in item.media) + ']'

        return (
            '  {\n'
            f'    id: {item.id},\n'
            f'    title: {quote(item.title)},\n'
            f'    date: {quote(item.date)},\n'
            f'    description: {quote(item.description)},\n'
            f'    image: {quote(item.image)},\n'
            f'    fullText: {quote(item.fullText)}{media}\n'
            '  }'
        )

    def serialize(self, items: list[NewsItem]) -> str:
        """
        Render news items into the canonical store text.

        Args:
            items: News items in the order they must appear

        Returns:
            Full content of the store file
        """
        body = ',\n'.join(self._render(item) for item in items) if items else PLACEHOLDER
        return f'{HEADER}{PROLOGUE}\n{body}\n{CLOSING}\n'

    def read(self, strict: bool | None = None) -> list[NewsItem]:
        """Load news items from disk. A missing file is an empty store."""
        strict = self.strict if strict is None else strict
        try:
            text = self.path.read_text(encoding='utf-8')
        except FileNotFoundError:
            logger.debug(f'News store {self.path} does not exist yet')
            return []
        except (OSError, UnicodeDecodeError) as e:
            if strict:
                raise StorageError(f'Cannot read news store: {e}') from e
            logger.error(f'Error reading news store {self.path}: {e}')
            return []

        return self.parse(text, strict)

    def load_for_update(self) -> list[NewsItem]:
        """
        Load news items that are about to be written back.

        Always strict: skipping a record here would erase it on the next
        write.

        Raises:
            StorageError: Store file cannot be read or is corrupt
        """
        return self.read(strict=True)

    def write(self, items: list[NewsItem]):
        """
        Replace the store file with the given items.

        The new content goes to a temporary file that is then renamed over
        the store, so readers never see a half-written file.
        """
        content = self.serialize(items)
        tmp_path = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(
                dir=self.path.parent, prefix=f'.{self.path.name}.', suffix='.tmp',
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as tmp_file:
                tmp_file.write(content)
            os.replace(tmp_path, self.path)
        except OSError as e:
            if tmp_path is not None and os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error(f'Error writing news store {self.path}: {e}')
            raise StorageError(f'Cannot write news store: {e}') from e

        logger.info(f'News store updated ({len(items)} items)')

    def ensure_exists(self):
        """Create the store file with an empty array if it is missing."""
        if self.path.exists():
            return
        logger.info(f'Creating news store at {self.path}')
        self.write([])
