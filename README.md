# groupfun

Building blocks for a group chat bot: small games, daily records kept in
SQLite, and thin clients for a few public web services. No module depends
on a chat platform. You pass in group and user numbers, names, timestamps
and data, and you get back plain Python values. Your bot sends them to the
chat.

## Installation

```
pip install groupfun
```

To run the tests as well:

```
pip install "groupfun[test]"
pytest
```

## Modules

| Module | What it does |
| --- | --- |
| `groupfun.marriage` | A daily "group wife" register in SQLite (`Registry`). It offers `lookup`, `register`, `divorce`, `remarry`, `roster`, `reset` and `check_update`, plus checks that say whether a request is allowed (`check_single`, `check_mistress`, `check_married`). `slice_name` shortens a name to fit a drawn width, given a function that measures characters. |
| `groupfun.runcode` | Runs a code snippet through an online compiler (`run_code`). It also holds the supported languages (`lookup_language`) with a hello-world `template` for each, and trims long output (`clear_newline_suffix`, `cut_too_long`). The form token comes from the `RUNCODE_TOKEN` environment variable. |
| `groupfun.wtf` | A table of quiz generators (`TABLE`, `get_wtf`, `list_text`). `Wtf.predict` queries the service with the names you give it. |
| `groupfun.score` | A sign-in and score store (`ScoreDB`), level thresholds (`get_level`, `next_level_score`) and a greeting for the time of day (`get_hour_word`). |
| `groupfun.sleep` | Good-night and good-morning records (`SleepDB.sleep`, `SleepDB.get_up`). Each returns your place in that night's or morning's order and the time since your last record. `split_duration`, `is_morning` and `is_evening` are the helpers around them. |
| `groupfun.wordle` | A word-guessing game (`WordleGame`). It marks each letter (`classify`, `Mark`) and renders the board as PNG bytes. |
| `groupfun.tarot` | Parses card and spread JSON (`load_cards`, `load_formations`), draws distinct cards (`draw_cards`), builds image URLs and writes the text for a spread. |
| `groupfun.vtb` | A store of vtuber quotations in three levels (`VtbDB`) with numbered menus, lookups and a random clip. It loads itself from JSON (`store_vtb_list`, `store_vtb_page`) or downloads that JSON (`fetch_vtb_list`, `fetch_vtb_page`). `escape_record_url` encodes the file name part of a clip URL. |
| `groupfun.reborn` | A weighted random rebirth (`Reborn`): a country from a rate table you supply (`load_rates`) and a gender from fixed weights. |
| `groupfun.ymgal` | Picture sets from a galgame catalogue site in SQLite (`YmgalDB`). You can pick one at random or search by keyword. The page parsers (`parse_page_number`, `parse_pic_ids`, `parse_picset`) and `update` read the site through a `fetch` callable that you provide. |
| `groupfun.wordcount` | Counts Chinese words while skipping stopwords (`load_stopwords`, `count_words`) and ranks the counts (`rank_by_word_count`). |

## Examples

A word game:

```python
from groupfun.wordle import WordleGame, load_wordlist, TimesRunOutError

dictionary = load_wordlist("apple\nangle\nample\n")
game = WordleGame("apple", dictionary)
try:
    won = game.guess("angle")
except TimesRunOutError:
    won = False
png_bytes = game.render()
```

The daily marriage register:

```python
from groupfun.marriage import Registry, check_single

with Registry("marriage.db") as registry:
    reason = check_single(registry, gid=1000, uid=1, fiancee=2)
    if reason is None:
        registry.register(1000, 1, 2, "Alice", "Bob")
    record, status = registry.lookup(1000, 1)
```

Scores:

```python
from groupfun.score import ScoreDB, get_level

with ScoreDB("score.db") as db:
    db.set_score(42, 10)
    print(get_level(db.get_score(42)))
```

Hot words:

```python
from groupfun.wordcount import load_stopwords, count_words, rank_by_word_count

stopwords = load_stopwords("的\n了\n")
counts = count_words(["今天", "天气", "今天", "的"], stopwords)
print(rank_by_word_count(counts))  # [('今天', 2), ('天气', 1)]
```

## Errors

The network helpers (`run_code`, `Wtf.predict`, `VtbDB.fetch_vtb_list`,
`VtbDB.fetch_vtb_page`) use `requests`. `run_code` raises `RunCodeError`
and `Wtf.predict` raises `WtfError` when the request fails or the service
reports an error. Other modules raise their own exceptions:
`RegistryError`, `WordleError` and its subclasses, `TarotError`, and
`ValueError` for data they cannot parse.

## What this package does not do

- It is not a bot. It has no commands, no message handling, no cooldowns
  and no connection to any chat service.
- It draws no pictures except the word-game board. It does not render the
  marriage roster, the sign-in card or the score and hot-word charts.
- It downloads no data files. Tarot cards and spreads, rebirth rates,
  word lists and stopwords are passed in by the caller.
- For the hot-word counter it neither fetches chat history nor splits
  text into words. You pass in the word slices yourself.
- It downloads no catalogue pages or voice clips itself, apart from the
  vtuber JSON listings. `groupfun.ymgal.update` uses the `fetch`
  function you give it.