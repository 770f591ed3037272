# botplugins

Building blocks for group-chat bot features, kept free of any particular bot
framework. Each module holds the parsing, decision logic and SQLite storage of
one feature; receiving messages and sending replies is left to the bot that
uses them. Functions that involve chance take a `random.Random` (or a roll)
from the caller, and functions that depend on the clock take the time as an
argument, so results can be reproduced.

## Modules

- `botplugins.nsfw`: `Picture` holds class scores; `judge(p)` returns the
  rating text, `autojudge(p)` returns a remark or `None` when nothing is flagged.
- `botplugins.runcode`: `cut_too_long(text)` cuts program output after more
  than 30 line breaks or 1000 characters and appends a dotted marker.
- `botplugins.realcugan`: `choose_scale`, `choose_model` and `model_name` pick
  the upscaling model file from a spell phrase and the image size;
  `build_request` encodes the JSON request body and `extract_image` reads the
  base64 PNG out of a response.
- `botplugins.sleep_manage`: `SleepDB(path)` records good nights
  (`sleep`) and good mornings (`get_up`), returning the rank in the group and
  the elapsed time; `time_duration`, `is_morning`, `is_evening`,
  `morning_reply` and `evening_reply` cover the time windows and reply texts.
- `botplugins.score`: `ScoreDB(path)` stores scores and sign-in counts
  (`get_score`, `set_score`, `get_sign_in`, `set_sign_in_count`,
  `top_scores`); `sign_in(db, uid, now, rng)` performs a daily sign-in and
  returns a `SignInOutcome`; `get_rank`, `next_rank_score` and `get_hour_word`
  give levels and greetings.
- `botplugins.nativewife`: `WifeStore(base)` keeps one picture folder per group
  (`list`, `add`, `remove`, `draw`); `daily_index` makes the draw fixed for a
  name on a given day; `extract_name`, `can_add_wife` and
  `parse_permission_switch` handle commands and permissions.
- `botplugins.nihongo`: `GrammarDB(path)` returns random `Grammar` entries by
  tag or keyword; `Grammar.text()` renders an entry; `parse_tag_command` and
  `parse_search_command` read the commands.
- `botplugins.omikuji`: `KujiDB(path).get(bango)` returns a slip's
  interpretation; `image_names(bango)` gives its two image file names.
- `botplugins.tiangou`: `TiangouDB(path).pick(rng)` returns a random diary entry.
- `botplugins.tarot`: `TarotDeck.from_json(cards_json, formations_json)`
  builds a deck; `draw`, `spread`, `lookup` and `card_list_text` produce
  `Draw` results and listings; `parse_draw_command` reads the draw command.
- `botplugins.reborn`: `WeightedChooser`, `load_rates(text)`,
  `gender_chooser()` and `reborn(area_chooser, rng)` roll a rebirth.
- `botplugins.vtb_model`: `VtbDB(path)` stores a three-level catalogue of voice
  clips, builds the selection menus, picks clips, and loads list and page
  responses with `store_vtb_list` and `store_vtb_page`; `decode_payload`
  turns literal `\uXXXX` escapes into characters.
- `botplugins.thesaurus`: `set_reply_type`, `set_probability` and `can_match`
  pack and read a group's reply settings in an integer; `render_reply` fills a
  reply template; `load_simai` reads the YAML reply dictionaries.
- `botplugins.qzone_model`: `QzoneDB(path)` stores login cookies and love-wall
  `Emotion` posts with their `Status`; `parse_status_word` and `parse_id_list`
  read review commands.

## Example

```python
import random
from datetime import datetime

from botplugins.score import ScoreDB, sign_in

with ScoreDB("score.db") as db:
    outcome = sign_in(db, 12345, datetime.now(), random.Random())
    print(outcome)
```

## What it does not do

The package makes no network requests and renders no images: it does not
download pictures, call classification, upscaling, translation or code-running
services, or log in to any account. It has no bot runtime, no message routing
and no command-line program. `sign_in` computes the coins earned but keeps no
wallet of its own.

## Installing and testing

```
pip install .
pip install ".[test]"
pytest
```