# og-card

`og_card` renders OpenGraph preview images ("social cards") for software
packages. It fills a Typst template with the package's name, version,
description, licence, tags, authors and a few statistics. The `typst`
command-line compiler turns the template into a PNG. If the `oxipng`
optimiser is available, the PNG is then passed through it.

## Requirements

- Python 3.10 or later, and `httpx`.
- The `typst` binary. It is looked up on `PATH` unless configured otherwise.
- Optionally the `oxipng` binary. If it is missing or fails, the image is
  still produced, only without optimisation.
- A template directory that you supply (see below).

## Describing a package

```python
from og_card.data import OgImageAuthorData, OgImageData

data = OgImageData(
    name="example-crate",
    version="1.2.3",
    description="An example crate for testing OpenGraph image generation",
    license="MIT/Apache-2.0",
    tags=["example", "testing", "og-image"],
    authors=[
        OgImageAuthorData("example-user"),
        OgImageAuthorData.with_url("another-user", "https://avatars.example.com/u/1"),
    ],
    lines_of_code=2000,
    crate_size=75,
    releases=5,
)

print(data.to_json())
```

`OgImageData` is a frozen dataclass and takes keyword arguments only.
`tags` and `authors` default to empty and are stored as tuples.
`OgImageAuthorData` holds a `name` and an optional `avatar` URL.

`to_dict()` returns the input for the template, and `to_json()` returns the
same data as compact JSON. If a field cannot be serialised, `to_json()`
raises `JsonSerializationError`. The numbers are already formatted for
display in both forms:

- `crate_size` becomes a byte size: `"75 B"`, `"1.46 KiB"`, `"100 MiB"`.
- `releases` and `lines_of_code` become compact counts: `"1499"`, `"1.5K"`, `"10M"`.
- A missing `lines_of_code` stays `None` (`null` in JSON).

The formatting helpers can also be used on their own:

```python
from og_card.formatting import format_bytes, format_number, format_optional_number

format_bytes(1500)            # "1.46 KiB"
format_bytes(1048575)         # "1024 KiB"
format_number(1_500_000)      # "1.5M"
format_number(999_999)        # "1000K"
format_optional_number(None)  # None
```

Units switch at 1500: bytes are divided by 1024 and counts by 1000. These
functions accept integers from 0 to 2³²−1. A value outside that range raises
`ValueError`, and a value that is not an integer raises `TypeError`.

## Generating an image

```python
import asyncio

from og_card.generator import OgImageGenerator


async def render(data):
    generator = OgImageGenerator.from_environment().with_template_dir("path/to/template")
    return await generator.generate(data)


png_path = asyncio.run(render(data))
```

The template directory must contain:

- `og-image.typ`, the template itself.
- An `assets/` directory with these files: `cargo.png`, `rust-logo.svg`,
  `code-branch.svg`, `code.svg`, `scale-balanced.svg`, `tag.svg` and
  `weight-hanging.svg`.

`generate(data)` does the following:

1. It creates a temporary working directory and copies the template and its
   assets into it. If a file cannot be copied, it raises `OgIoError`.
2. It downloads the authors' avatars with `process_avatars`. Each one is
   saved as `avatar_<index>.png` or `avatar_<index>.jpg`. An avatar is skipped
   with a logged warning in two cases: its URL answers 404, or the file is
   neither PNG nor JPEG. Any other HTTP or network failure raises
   `AvatarDownloadError`.
3. It runs `typst compile --format png` with two inputs: `data` (the JSON from
   `to_json()`) and `avatar_map` (a JSON mapping from avatar URL to local file
   name). `build_typst_command` returns this argument list.
4. It runs `oxipng --opt 2 --strip safe` on the result.

`generate` returns the `Path` of a temporary PNG file. The caller owns this
file and should delete it when it is no longer needed. The working directory
is removed before `generate` returns.

The Typst and oxipng processes run with a cleared environment. Both keep
`PATH`, and Typst also keeps `HOME` for font discovery.

`detect_image_format(data)` looks at the magic bytes of `data`. It returns
`"png"` or `"jpg"`, and `None` for anything else.

Progress is logged through the standard `logging` module, under the logger
`og_card.generator`.

### Configuration

`OgImageGenerator.from_environment()` reads these variables:

| Variable          | Meaning                                                        |
|-------------------|----------------------------------------------------------------|
| `TYPST_PATH`      | path to the `typst` binary (default: `typst` on `PATH`)        |
| `TYPST_FONT_PATH` | font directory; Typst then ignores system fonts                |
| `OXIPNG_PATH`     | path to the `oxipng` binary (default: `oxipng` on `PATH`)      |

`OgImageGenerator` is immutable. Each `with_*` method returns a configured
copy:

```python
generator = (
    OgImageGenerator()
    .with_typst_path("/usr/local/bin/typst")
    .with_font_path("/usr/share/fonts")
    .with_oxipng_path("/usr/local/bin/oxipng")
    .with_template_dir("path/to/template")
)
```

`og_card.env.var(key)` returns the value of an environment variable, or
`None` if it is unset. If the value is not valid Unicode, it raises
`EnvVarError`.

## Errors

Every failure raises a subclass of `og_card.errors.OgImageError`:

- `TypstNotFoundError`: the Typst binary could not be started.
- `TypstCompilationError`: Typst exited with an error. The error carries
  `stderr`, `stdout` and `exit_code`. `exit_code` is `None` if the process
  was killed by a signal.
- `AvatarDownloadError`: an avatar could not be fetched. The error carries
  `url` and `source`.
- `AvatarWriteError`: an avatar could not be written to disk. The error
  carries `path` and `source`.
- `EnvVarError`: an environment variable could not be read.
- `JsonSerializationError`: the data could not be turned into JSON.
- `TempFileError`: the temporary output file could not be created.
- `TempDirError`: the temporary working directory could not be created.
- `OgIoError`: the template or its assets could not be copied.

## What it does not do

- It does not ship a Typst template or its assets. The default template
  directory is `og_card/template`, which the package does not include. Pass
  your own directory with `with_template_dir`.
- It has no command-line program. It is a library to call from Python.