# freeroom

Works out which classrooms are free in each teaching week, on each day, in
each building, period by period, and stores the result in MongoDB.

The data comes from the course-selection handbook spreadsheet. Each room
starts out free for all twelve periods of every day of weeks 1 to 21. Every
course in the handbook then removes its room from the periods it occupies.

Buildings covered: `7`, `8` and `N`.

## Install

```
pip install .
```

## Configuration

The `freeroom` command reads a YAML file. Without `--config` it reads
`conf/config.yaml` under the current working directory. You can override any
key from the environment. Use the prefix `CCNUBOX_CLASSROOM_` and replace dots
with underscores: `db.url` becomes `CCNUBOX_CLASSROOM_DB_URL`. A variable that
is set but empty is ignored. Keys are matched without regard to case.

```yaml
runmode: debug          # debug, test or release
addr: :8080             # host:port to listen on; an empty host means 0.0.0.0
url: http://127.0.0.1:8080
max_ping_count: 10
db:
  url: mongodb://localhost:27017
  name: ccnubox         # default when unset
```

When it starts, the command connects to MongoDB and pings it. If the database
cannot be reached, the command stops with the error.

Log lines go to stdout and to `./logs/api_server1.log`. That file is rotated at
128 MB, and up to 5 gzip-compressed backups are kept.

## Importing the handbook

```
freeroom --config conf/config.yaml --path handbook.xlsx
```

The spreadsheet layout:

- Columns 10/11, 12/13 and 14/15 of every sheet hold time and place pairs,
  such as `星期一第9-10节{1-15周(单)}` and `N201`.
- Rows whose place is in another building are skipped.
- Entries that cannot be parsed are logged and skipped.

The import does three things:

1. Builds the full free-room table.
2. Removes the busy rooms.
3. Inserts all records in one batch.

If the insert fails, the error is logged and raised.

## Serving

```
freeroom --config conf/config.yaml
```

This runs a Flask server on `addr`. A background thread polls
`url + /sd/health` up to `max_ping_count` times, one second apart. If the
server never answers, the process exits.

| Route | Answer |
| --- | --- |
| `GET /sd/health` | `OK` |
| `GET /sd/disk` | usage of `/`; 429 at 90 %, still 200 at 95 % (`CRITICAL`) |
| `GET /sd/cpu` | 5-minute load against physical cores; 429 at cores − 2, 500 at cores − 1 |
| `GET /sd/ram` | memory usage; 429 at 90 %, 500 at 95 % |

Any other route answers 404 with `The incorrect API route.`

Every response carries headers that stop caching. Other requests also get:

- the security headers;
- an `X-Request-Id` header, either taken from the request or a new UUID4.

`OPTIONS` requests are answered at once with CORS preflight headers.

## What it does not do

The HTTP server has no route that answers classroom queries. It serves only
the health checks above. To read stored records, use `ClassroomStore.get`
directly (see below). No per-request access log and no authentication are
provided.

## Library use

```python
from freeroom.config import load_config
from freeroom.models import connect, ClassroomNotFound
from freeroom.importer import import_classroom_data

settings = load_config("conf/config.yaml")
with connect(settings.get("db.url", ""), settings.get("db.name", "ccnubox")) as store:
    import_classroom_data("handbook.xlsx", store)
    try:
        record = store.get(3, 1, "7")
        print(record.to_document())
    except ClassroomNotFound:
        print("no data")
```

The table can also be built and edited without a database:

```python
from freeroom.rooms import build_all_classrooms, remove_busy_rooms
from freeroom.parse import CourseItem

instances = build_all_classrooms()
remove_busy_rooms(instances, CourseItem(weeks=[1, 2], day=1, time=(1, 2), place="7101"))
```

Helpers:

- `freeroom.xlsxreader.read_workbook` returns the sheets of an `.xlsx` file as
  rows of cell text.
- `freeroom.parse.iter_courses` yields the courses found in those sheets.

```python
from freeroom.parse import extract_weeks, extract_class_time

extract_weeks("1-7周(单)")   # [1, 3, 5, 7]
extract_class_time("9-10")   # (9, 10)
```

`freeroom.app.create_app(settings)` returns the Flask application for use in
another server.