# compkit

A small toolkit of building blocks that service code keeps needing: a set
type that works for any hashable items, field-level validation errors and
validators, fake and real clocks, a retry helper, ID and secret generation,
and a handful of file, string, JSON and network helpers. It depends on
nothing outside the standard library.

## What is inside

| Module | Purpose |
| --- | --- |
| `compkit.sets` | `Set` with `insert`, `delete`, `has_all`, `has_any`, `union`, `intersection`, `difference`, sorted `list()` and `pop_any()`; `key_set(mapping)` |
| `compkit.sliceutil` | `remove_string`, `find` |
| `compkit.stringutil` | `diff`, `unique`, `find_string`, `string_in`, `reverse`, `decode_base64`, camel/underscore case conversion |
| `compkit.iputil` | `get_local_ip`, `remote_ip` from a remote address and request headers, `is_valid_port` |
| `compkit.homedir` | `home_dir` resolution on Windows and elsewhere |
| `compkit.field.path` | `Path` and `new_path` for describing where a value lives |
| `compkit.field.errors` | `ErrorType`, `FieldError`, `ErrorList`, `Aggregate` and constructors such as `invalid`, `required`, `not_supported`, `too_long` |
| `compkit.validation` | `is_qualified_name`, `is_valid_label_value`, `is_dns1123_label`, `is_dns1123_subdomain`, `is_valid_ip`, `is_valid_ipv4_address`, `is_valid_ipv6_address`, `is_valid_percent`, `is_valid_password`, ... |
| `compkit.version` | `Info` build information and `get()` |
| `compkit.verflag` | a `--version` option for `argparse` parsers |
| `compkit.retryutil` | `retry_until_timeout` with `RetryableError`, `RetryTimeoutError`, `RetryCancelledError` |
| `compkit.idutil` | `get_int_id`, `new_secret_id`, `new_secret_key`, `rand_string` |
| `compkit.clock` | `RealClock`, `FakeClock`, `FakePassiveClock`, `IntervalClock` |
| `compkit.signals` | `setup_signal_handler` for graceful shutdown |
| `compkit.runtime` | `handle_crash`, `handle_error`, `recover_from_panic`, `must`, `get_caller` |
| `compkit.fileutil` | `touch`, `ensure_dir`, `ensure_dir_all`, `empty_dir`, `list_dir`, `safe_move`, `write_file`, `get_intra_dir`, `match_entries`, ... |
| `compkit.jsonutil` | `Json` for navigating decoded documents, `RawMessage`, `encode`/`decode`/`to_string` |

## Examples

### Sets

```python
from compkit.sets import Set

s = Set(["z", "y", "x", "a"])
s.insert("b")
assert s.list() == ["a", "b", "x", "y", "z"]
assert s.has_all("a", "b")
assert Set(["1", "2"]).equal(Set(["2", "1"]))
```

### Validating values

The `is_*` validators return a list of human-readable messages; an empty list
means the value is fine. `is_valid_password` raises `ValueError` naming every
problem instead.

```python
from compkit.validation import is_dns1123_label, is_qualified_name

assert is_dns1123_label("my-name") == []
assert is_dns1123_label("My_Name") != []
assert is_qualified_name("example.com/MyName") == []
```

### Field errors

```python
from compkit.field.path import new_path
from compkit.field.errors import ErrorList, invalid, not_supported

path = new_path("spec").child("containers").index(0).child("image")
assert str(path) == "spec.containers[0].image"

errors = ErrorList([
    invalid(path, "", "must not be blank"),
    not_supported(new_path("kind"), "v", ["a", "b"]),
])
print(errors.to_aggregate())
```

`ErrorList.to_aggregate()` drops duplicate messages and returns `None` when
the list is empty; `ErrorList.filter(...)` removes errors matched by
`new_error_type_matcher(...)`.

### Strings

```python
from compkit.stringutil import diff, reverse

assert diff(["foo", "bar", "hello"], ["foo", "bar", "world"]) == ["hello"]
assert reverse("abc") == "cba"
```

### Retrying

The operation raises `RetryableError` to ask for another attempt; anything it
returns is handed back, and any other exception propagates.

```python
from compkit.retryutil import RetryableError, retry_until_timeout

attempts = []

def connect():
    attempts.append(1)
    if len(attempts) < 3:
        raise RetryableError()
    return "connected"

assert retry_until_timeout(0.01, 1.0, connect) == "connected"
```

When the timeout elapses `RetryTimeoutError` is raised; passing a
`threading.Event` as `stop` and setting it raises `RetryCancelledError`.

### Clocks in tests

Code that takes a clock can be driven deterministically with `FakeClock`:
timers and tickers created from it fire only when the test calls `step`
or `set_time`. Their channels are `queue.Queue` objects.

```python
from datetime import datetime, timedelta, timezone
from compkit.clock import FakeClock

clock = FakeClock(datetime(2024, 1, 1, tzinfo=timezone.utc))
timer = clock.new_timer(timedelta(seconds=5))
clock.step(4)
assert timer.c().empty()
clock.step(1)
assert timer.c().get_nowait() == datetime(2024, 1, 1, 0, 0, 5, tzinfo=timezone.utc)
```

### JSON

```python
from compkit.jsonutil import new_json

doc = new_json(b'{"a": {"b": 1}}')
assert doc.get_path("a", "b").as_int() == 1
```

### A version flag

```python
import argparse
from compkit.verflag import add_flags, print_and_exit_if_requested

parser = argparse.ArgumentParser()
add_flags(parser)
args = parser.parse_args()
print_and_exit_if_requested(args.version)
```

`--version` alone prints the table from `compkit.version.Info.text()`;
`--version=raw` prints the `Info` representation; both then exit.

## What it does not do

There are no polling, periodic-run or exponential-backoff loops here; the
clocks give timers and tickers to build such loops on, and
`retry_until_timeout` covers fixed-interval retries only. The package offers
no command-line program of its own.

## Running the tests

Install the `test` extra and run `pytest` from the project directory.