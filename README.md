# dotcore

`dotcore` is a library of building blocks for a dotfile manager. Such a tool
keeps a source directory of specially named files and turns it into the files,
directories, symlinks and scripts in a home directory. `dotcore` parses those
names and describes entry states. It also provides read-only and recording
"systems", persistent state, serialisation formats and wrappers around
external encryption tools.

## Installation

```
pip install dotcore
```

To run the test suite:

```
pip install "dotcore[test]"
pytest
```

## Modules

### Source names and attributes (`dotcore.attr`)

A name in the source directory records how the entry should appear in the
target. The parser reads these prefixes and suffixes into `FileAttr` and
`DirAttr` values:

* the prefixes `dot_`, `private_`, `readonly_`, `executable_`, `empty_`,
  `encrypted_`, `create_`, `modify_`, `remove_`, `run_`, `once_`, `before_`,
  `after_`, `symlink_`, `exact_` and `literal_`;
* the suffixes `.tmpl` and `.literal`.

`source_name` goes the other way, from attributes back to a name.

```python
from dotcore.attr import parse_dir_attr, parse_file_attr

fa = parse_file_attr("private_dot_netrc.tmpl", ".asc")
fa.target_name            # ".netrc"
fa.private, fa.template   # (True, True)
fa.source_name(".asc")    # "private_dot_netrc.tmpl"
fa.perm()                 # 0o600

da = parse_dir_attr("exact_dot_config")
da.target_name, da.exact  # (".config", True)
```

`SourceFileTargetType` says whether a source file stands for a file, a
create-once file, a modify script, a removal, a script or a symlink.

### Shared helpers (`dotcore.core`)

This module holds:

* the name prefix and suffix constants;
* the special-file prefix `.dotcore` and the names of the special files that
  use it;
* `sha256_sum`, `is_empty` and `mode_type_name`;
* the permission tests `is_executable`, `is_private` and `is_read_only`;
* `suspicious_source_dir_entry`;
* `UnsupportedFileTypeError`;
* the process umask, read once at import, as `UMASK`.

### Paths (`dotcore.paths`)

`AbsPath` and `RelPath` are `str` subclasses for slash-separated paths. They
provide `join`, `dir`, `base`, `split` and `trim_dir_prefix`. When the path is
not inside the given directory, `trim_dir_prefix` raises `NotInAbsDirError` or
`NotInRelDirError`.

Other functions in the module:

* `new_abs_path_from_ext_path` expands a leading `~` and makes a path
  absolute.
* `normalize_path` makes a path absolute.
* `home_dir_abs_path` reads `$HOME` (`%USERPROFILE%` on Windows).
* `normalize_linkname` and `windows_normalize_linkname` tidy up symlink
  targets.

### Automatic templates (`dotcore.autotemplate`)

`auto_template(contents, data)` replaces string values found in a nested data
mapping with `{{ .name }}` references. It replaces only whole words and tries
the longest values first.

```python
from dotcore.autotemplate import auto_template

auto_template(b"email = you@example.com\n", {"email": "you@example.com"})
# (b"email = {{ .email }}\n", True)
```

### Entry states (`dotcore.entrystate`, `dotcore.actualstate`, `dotcore.lazy`)

`EntryState` records an entry's type, mode and contents SHA-256. `equal`
compares two states; on Windows the permission bits are ignored. The
module-level `equivalent` function also treats `None` as an absent entry, and
so as equivalent to a `remove` state.

`new_actual_state_entry(system, path, info=None)` describes what exists now.
It returns `ActualStateAbsent`, `ActualStateDir`, `ActualStateFile` or
`ActualStateSymlink`. File contents and link targets are read through the
given system only when first needed, using `LazyContents` and `LazyLinkname`.

### Entry type sets (`dotcore.entrytypeset`)

`parse_entry_type_set` turns a comma-separated list into an `EntryTypeSet`:

* The names are `all`, `dirs`, `files`, `remove`, `scripts`, `symlinks` and
  `encrypted`, each optionally prefixed with `no`.
* The string `none` gives the empty set.
* If the first name is a `no…` name, parsing starts from `all` and removes
  from there.

```python
from dotcore.entrytypeset import parse_entry_type_set

str(parse_entry_type_set("dirs,files"))        # "dirs,files"
parse_entry_type_set("all,noscripts").bits
```

An unknown name raises `ValueError`.

### Host information (`dotcore.hostinfo`)

Each of these functions takes a root directory, default `/`, so it can be
pointed at a fake tree:

* `fqdn_hostname` looks at `etc/hosts` for the `127.0.1.1` entry, then at
  `etc/hostname`. On Windows it uses the socket library instead.
* `kernel` reads `proc/sys/kernel`.
* `os_release` reads `usr/lib/os-release`, then `etc/os-release`.

`parse_os_release` parses os-release text on its own.

### Persistent state (`dotcore.persistentstate`)

A persistent state is a set of buckets of byte keys and values. Every backend
offers `get`, `set`, `delete`, `items` (a generator), `data`, `copy_to` and
`close`, and works as a context manager. There are three backends:

* `DatabasePersistentState` stores the state in an SQLite file. It can be
  opened `READ_WRITE` or `READ_ONLY` (`PersistentStateMode`). The file is
  created only on the first `set`, so reads and deletes on a missing file act
  as on an empty state.
* `MockPersistentState` keeps the state in memory.
* `NullPersistentState` returns nothing and discards all writes.

### Systems (`dotcore.archive`, `dotcore.dumpsystem`, `dotcore.dryrunsystem`)

* `ArchiveReaderSystem` presents a tar, tar.gz, tar.bz2 or zip archive held
  in memory as a read-only tree.
  * The archive format is guessed from the file name or the data when not
    given; `guess_archive_format` and `walk_archive` can also be used
    directly.
  * `root_abs_path` and `strip_components` control where the entries land.
  * `lstat`, `read_file` and `readlink` raise `FileNotFoundError` for missing
    entries, and an `OSError` (EINVAL) when the entry is of the wrong kind.
* `DumpSystem` records `mkdir`, `write_file`, `write_symlink` and
  `run_script` calls as `DirData`, `FileData`, `SymlinkData` and `ScriptData`
  records, available from `data()`. Writing the same path twice raises
  `FileExistsError`.
* `DryRunSystem` wraps another system. It passes reads through, drops every
  write, and sets `modified` when a write was attempted.

### Serialisation formats (`dotcore.formats`)

`get_format(name)` returns one of the following. Dataclasses, enums and
`HexBytes` values are converted before writing.

| Name | Format | Notes |
| --- | --- | --- |
| `json` | `JSONFormat` | Indented, sorted keys, trailing newline |
| `toml` | `TOMLFormat` | The top-level value must be a table |
| `yaml` | `YAMLFormat` | Block style, sorted keys |

`HexBytes` (in `dotcore.hexbytes`) is written as a lower-case hex string, and
`parse_hex_bytes` reads it back.

### Encryption (`dotcore.encryption`, `dotcore.ageencryption`, `dotcore.gpgencryption`)

`Encryption` is the abstract interface. It has `encrypt`, `decrypt`,
`encrypt_file`, `decrypt_to_file` and `encrypted_suffix`.

* `AgeEncryption` runs the `age` command, with the suffix `.age` by default.
* `GPGEncryption` runs the `gpg` command, with the suffix `.asc` by default.
  It works through a private temporary directory (`private_temp_dir`).
* `NoEncryption` raises `NoEncryptionError` from every operation.

A failing command raises `subprocess.CalledProcessError`.

### Other small pieces

* `dotcore.shellquote`: `shell_quote_args(["foo", "bar baz"])` returns
  `"foo 'bar baz'"`.
* `dotcore.mode`: `parse_mode` accepts `file` or `symlink` and raises
  `InvalidModeError` for anything else.
* `dotcore.interpreter`: `Interpreter.exec_command(name)` returns the
  argument list that runs a script.

## What this package does not do

`dotcore` has no command-line program and no configuration file handling.

It does not read a whole source directory into a target state, and it does
not apply changes to the real filesystem. There is no system class that
writes to disk: the systems provided only read archives, record writes or
drop them.

It does not execute templates, and it does not produce diffs.

Encryption is available only by running external `age` or `gpg` binaries,
which must be installed.