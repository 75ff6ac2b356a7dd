from __future__ import annotations

import pytest

from src.core.exceptions import RecordFormatError, StorageError
from src.integrations.news import RecordStore
from src.integrations.news.store import PLACEHOLDER, PROLOGUE
from tests.conftest import make_item

LEGACY_STORE = """export interface NewsItem {
  id: number;
  title: string;
  date: string;
  description: string;
  image: string;
  fullText: string;
  media?: string[];
}

export const newsConfig: NewsItem[] = [
  {
    id: 3,
    title: 'Open day',
    date: '2024-03-01',
    description: 'Come and visit',
    image: '/src/assets/news/news-1-2.jpg',
    fullText: 'Doors open at ten'
  },
  {
    id: 7,
    title: 'Tournament',
    date: '2024-04-12',
    description: 'Results',
    image: '/src/assets/news/news-3-4.png',
    fullText: 'We won', media: [ '/src/assets/news/a.png' ,'/src/assets/news/b.png' ]
  }
];
"""


def test_parse_legacy_file(store):
    items = store.parse(LEGACY_STORE)

    assert [item.id for item in items] == [3, 7]
    assert items[0].media is None
    assert items[1].media == ['/src/assets/news/a.png', '/src/assets/news/b.png']
    assert items[1].fullText == 'We won'


@pytest.mark.parametrize('text', [
    '',
    'export const somethingElse = [];',
    f'{PROLOGUE}\n];\n',
    f'{PROLOGUE}\n{PLACEHOLDER}\n];\n',
    f'{PROLOGUE}\n  // Здесь будут автоматически добавляться новости через админку\n];\n',
])
def test_parse_empty_segments(store, text):
    assert store.parse(text) == []


def test_round_trip_preserves_fields_and_order(store):
    items = [
        make_item(2, media=['/src/assets/news/m1.png', '/src/assets/news/m2.png']),
        make_item(1),
        make_item(5, media=['/src/assets/news/m3.webp']),
    ]

    assert store.parse(store.serialize(items)) == items


def test_round_trip_escapes_delimiters(store):
    item = make_item(
        1,
        title="It's here",
        description='Back\\slash and "double" quotes',
        fullText="Line one\nLine two\twith tab ]; and a {brace}",
    )

    text = store.serialize([item])

    assert "It\\'s here" in text
    assert store.parse(text) == [item]


def test_serialize_layout(store):
    text = store.serialize([make_item(1), make_item(2, media=['/a.png', '/b.png'])])

    assert text.startswith('export interface NewsItem {\n  id: number;')
    assert (
        "  {\n"
        "    id: 1,\n"
        "    title: 'Title 1',\n"
        "    date: '2024-05-01',\n"
        "    description: 'Description 1',\n"
        "    image: '/src/assets/news/news-1.png',\n"
        "    fullText: 'Full text 1'\n"
        "  },\n"
        "  {\n"
    ) in text
    assert "    fullText: 'Full text 2', media: ['/a.png', '/b.png']\n  }\n];\n" in text
    assert text.endswith('  }\n];\n')


def test_serialize_empty_list_writes_placeholder(store):
    text = store.serialize([])

    assert text.endswith(f'{PROLOGUE}\n{PLACEHOLDER}\n];\n')
    assert store.parse(text) == []


def test_serialize_omits_empty_media(store):
    text = store.serialize([make_item(1, media=[])])

    assert 'media' not in text.split(PROLOGUE)[1]


def test_lenient_parse_skips_bad_records(store):
    good = store.serialize([make_item(1)]).split(PROLOGUE)[1].split('\n];')[0]
    text = (
        f'{PROLOGUE}\n'
        "  { title: 'No id', id: 2, date: 'd', description: 'd', image: 'i', fullText: 'f' },\n"
        "  { id: 'x', title: 't', date: 'd', description: 'd', image: 'i', fullText: 'f' },\n"
        f'{good},\n'
        "  { id: 1, title: 'dup', date: 'd', description: 'd', image: 'i', fullText: 'f' }\n"
        '];\n'
    )

    assert store.parse(text) == [make_item(1)]


def test_lenient_parse_syntax_error_returns_empty(store):
    text = f"{PROLOGUE}\n  {{ id: 1, title: 'unterminated\n];\n"

    assert store.parse(text) == []


def test_strict_parse_raises(tmp_path):
    strict_store = RecordStore(tmp_path / 'newsConfig.ts', strict=True)
    text = f"{PROLOGUE}\n  {{ id: 1, title: 'only title' }}\n];\n"

    with pytest.raises(RecordFormatError):
        strict_store.parse(text)

    with pytest.raises(RecordFormatError):
        strict_store.parse('no array here')


def test_read_missing_file_is_empty(store):
    assert store.read() == []


def test_write_then_read(store):
    items = [make_item(1), make_item(2, media=['/x.png'])]

    store.write(items)

    assert store.read() == items
    assert [p.name for p in store.path.parent.iterdir()] == ['newsConfig.ts']


def test_write_failure_raises_storage_error(tmp_path):
    blocker = tmp_path / 'blocker'
    blocker.write_text('not a directory')
    broken_store = RecordStore(blocker / 'newsConfig.ts')

    with pytest.raises(StorageError):
        broken_store.write([make_item(1)])


def test_ensure_exists_creates_empty_store(store):
    store.ensure_exists()

    assert store.path.exists()
    assert store.read() == []

    store.write([make_item(4)])
    store.ensure_exists()
    assert store.read() == [make_item(4)]


def test_load_for_update_is_strict_on_lenient_store(store):
    store.write([make_item(1), make_item(2)])
    text = store.path.read_text(encoding='utf-8')
    store.path.write_text(text.replace("title: 'Title 2'", 'title: 2'), encoding='utf-8')

    assert store.read() == [make_item(1)]
    with pytest.raises(RecordFormatError):
        store.load_for_update()
