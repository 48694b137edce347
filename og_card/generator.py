"""Rendering of OpenGraph images with the Typst compiler."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
import tempfile
import time
from dataclasses import dataclass, replace
from pathlib import Path
from subprocess import DEVNULL, PIPE

import httpx

from og_card.data import OgImageData
from og_card.env import var
from og_card.errors import (
    AvatarDownloadError,
    AvatarWriteError,
    JsonSerializationError,
    OgIoError,
    TempDirError,
    TempFileError,
    TypstCompilationError,
    TypstNotFoundError,
)

logger = logging.getLogger(__name__)

TEMPLATE_FILE = "og-image.typ"
ASSET_FILES = (
    "cargo.png",
    "rust-logo.svg",
    "code-branch.svg",
    "code.svg",
    "scale-balanced.svg",
    "tag.svg",
    "weight-hanging.svg",
)

_PNG_MAGIC = b"\x89PNG\r\n\x1a\n"
_JPEG_MAGIC = b"\xff\xd8\xff"
_DEFAULT_TEMPLATE_DIR = Path(__file__).with_name("template")


def detect_image_format(data: bytes) -> str | None:
    """Return the file extension for PNG or JPEG data, or None for anything else."""
    if data.startswith(_PNG_MAGIC):
        return "png"
    if data.startswith(_JPEG_MAGIC):
        return "jpg"
    return None


def _preserved_env(*names: str) -> dict[str, str]:
    return {name: os.environ[name] for name in names if name in os.environ}


def _elapsed_ms(start: float) -> int:
    return int((time.monotonic() - start) * 1000)


@dataclass(frozen=True)
class OgImageGenerator:
    """Generates PNG images from a Typst template.

    Binaries default to "typst" and "oxipng" looked up in PATH.
    """

    typst_binary_path: Path = Path("typst")
    typst_font_path: Path | None = None
    oxipng_binary_path: Path = Path("oxipng")
    template_dir: Path = _DEFAULT_TEMPLATE_DIR

    @classmethod
    def from_environment(cls) -> OgImageGenerator:
        """Create a generator configured from TYPST_PATH, TYPST_FONT_PATH and OXIPNG_PATH."""
        typst_path = var("TYPST_PATH")
        font_path = var("TYPST_FONT_PATH")
        oxipng_path = var("OXIPNG_PATH")

        generator = cls()
        if typst_path is not None:
            logger.debug("Using custom Typst binary path from environment: %s", typst_path)
            generator = generator.with_typst_path(typst_path)
        else:
            logger.debug("Using default Typst binary path (assumes 'typst' in PATH)")

        if font_path is not None:
            logger.debug("Setting custom font path from environment: %s", font_path)
            generator = generator.with_font_path(font_path)
        else:
            logger.debug("No custom font path specified, using Typst default font discovery")

        if oxipng_path is not None:
            logger.debug("Using custom oxipng binary path from environment: %s", oxipng_path)
            generator = generator.with_oxipng_path(oxipng_path)
        else:
            logger.debug("OXIPNG_PATH not set, defaulting to 'oxipng' in PATH")

        return generator

    def with_typst_path(self, typst_path: str | os.PathLike[str]) -> OgImageGenerator:
        """Return a copy that runs the Typst binary at *typst_path*."""
        return replace(self, typst_binary_path=Path(typst_path))

    def with_font_path(self, font_path: str | os.PathLike[str]) -> OgImageGenerator:
        """Return a copy that uses only the fonts in *font_path*."""
        return replace(self, typst_font_path=Path(font_path))

    def with_oxipng_path(self, oxipng_path: str | os.PathLike[str]) -> OgImageGenerator:
        """Return a copy that optimizes images with the oxipng binary at *oxipng_path*."""
        return replace(self, oxipng_binary_path=Path(oxipng_path))

    def with_template_dir(self, template_dir: str | os.PathLike[str]) -> OgImageGenerator:
        """Return a copy that reads the template and its assets from *template_dir*."""
        return replace(self, template_dir=Path(template_dir))

    def build_typst_command(
        self,
        data_json: str,
        avatar_map_json: str,
        typ_file: str | os.PathLike[str],
        output_file: str | os.PathLike[str],
    ) -> list[str]:
        """Return the argument list that compiles *typ_file* into *output_file*."""
        command = [
            os.fspath(self.typst_binary_path),
            "compile",
            "--format",
            "png",
            "--input",
            f"data={data_json}",
            "--input",
            f"avatar_map={avatar_map_json}",
        ]
        if self.typst_font_path is not None:
            logger.debug("Using custom font path: %s", self.typst_font_path)
            command += ["--font-path", os.fspath(self.typst_font_path), "--ignore-system-fonts"]
        else:
            logger.debug("Using system font discovery")
        command += [os.fspath(typ_file), os.fspath(output_file)]
        return command

    async def process_avatars(
        self, data: OgImageData, assets_dir: str | os.PathLike[str]
    ) -> dict[str, str]:
        """Download author avatars into *assets_dir*.

        Returns a mapping from avatar URL to the local file name. Avatars that
        answer 404 or are neither PNG nor JPEG are skipped.
        """
        assets_dir = Path(assets_dir)
        avatar_map: dict[str, str] = {}

        async with httpx.AsyncClient(follow_redirects=True) as client:
            for index, author in enumerate(data.authors):
                url = author.avatar
                if url is None:
                    continue

                logger.debug("Downloading avatar for author %s from %s", author.name, url)
                try:
                    response = await client.get(url)
                except httpx.HTTPError as exc:
                    raise AvatarDownloadError(url, exc) from exc

                if response.status_code == 404:
                    logger.warning("Avatar URL returned 404 Not Found: %s", url)
                    continue

                if response.is_error:
                    try:
                        response.raise_for_status()
                    except httpx.HTTPStatusError as exc:
                        raise AvatarDownloadError(url, exc) from exc

                content = response.content
                logger.debug("Avatar downloaded from %s (%d bytes)", url, len(content))

                extension = detect_image_format(content)
                if extension is None:
                    hex_bytes = " ".join(f"{byte:02x}" for byte in content[:20])
                    logger.warning(
                        "Unsupported avatar format at %s, first 20 bytes: %s", url, hex_bytes
                    )
                    continue

                filename = f"avatar_{index}.{extension}"
                avatar_path = assets_dir / filename
                try:
                    avatar_path.write_bytes(content)
                except OSError as exc:
                    raise AvatarWriteError(avatar_path, exc) from exc

                logger.debug("Avatar for %s written to %s", author.name, avatar_path)
                avatar_map[url] = filename

        return avatar_map

    async def generate(self, data: OgImageData) -> Path:
        """Render *data* to a PNG file and return its path.

        The file is a temporary file owned by the caller, who should delete it
        when it is no longer needed.
        """
        start = time.monotonic()
        logger.info("Starting OpenGraph image generation for %s %s", data.name, data.version)

        try:
            temp_dir = tempfile.TemporaryDirectory(prefix="og-image-")
        except OSError as exc:
            raise TempDirError(exc) from exc

        with temp_dir as root_name:
            root = Path(root_name)
            assets_dir = root / "assets"
            try:
                assets_dir.mkdir()
                for name in ASSET_FILES:
                    shutil.copyfile(self.template_dir / "assets" / name, assets_dir / name)
            except OSError as exc:
                raise OgIoError(exc) from exc

            avatar_start = time.monotonic()
            avatar_map = await self.process_avatars(data, assets_dir)
            logger.info(
                "Avatar processing completed: %d avatars in %d ms",
                len(avatar_map),
                _elapsed_ms(avatar_start),
            )

            typ_file = root / TEMPLATE_FILE
            try:
                shutil.copyfile(self.template_dir / TEMPLATE_FILE, typ_file)
            except OSError as exc:
                raise OgIoError(exc) from exc

            output_file = self._create_output_file()
            try:
                await self._compile(data, avatar_map, typ_file, output_file)
            except BaseException:
                output_file.unlink(missing_ok=True)
                raise

        await self._optimize_png(output_file)

        logger.info(
            "OpenGraph image generation completed in %d ms (%d bytes)",
            _elapsed_ms(start),
            self._file_size(output_file),
        )
        return output_file

    @staticmethod
    def _create_output_file() -> Path:
        try:
            with tempfile.NamedTemporaryFile(suffix=".png", delete=False) as handle:
                return Path(handle.name)
        except OSError as exc:
            raise TempFileError(exc) from exc

    @staticmethod
    def _file_size(path: Path) -> int:
        try:
            return path.stat().st_size
        except OSError:
            return 0

    async def _compile(
        self,
        data: OgImageData,
        avatar_map: dict[str, str],
        typ_file: Path,
        output_file: Path,
    ) -> None:
        data_json = data.to_json()
        try:
            avatar_map_json = json.dumps(avatar_map, ensure_ascii=False, separators=(",", ":"))
        except (TypeError, ValueError) as exc:
            raise JsonSerializationError(exc) from exc

        command = self.build_typst_command(data_json, avatar_map_json, typ_file, output_file)
        logger.info("Running Typst compilation command")
        start = time.monotonic()
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=DEVNULL,
                stdout=PIPE,
                stderr=PIPE,
                env=_preserved_env("PATH", "HOME"),
            )
        except OSError as exc:
            raise TypstNotFoundError(exc) from exc
        stdout, stderr = await process.communicate()

        if process.returncode != 0:
            exit_code = process.returncode if process.returncode >= 0 else None
            stderr_text = stderr.decode("utf-8", errors="replace")
            stdout_text = stdout.decode("utf-8", errors="replace")
            logger.error(
                "Typst compilation failed (exit code %s) after %d ms: %s",
                exit_code,
                _elapsed_ms(start),
                stderr_text,
            )
            raise TypstCompilationError(stderr_text, stdout_text, exit_code)

        logger.debug(
            "Typst compilation completed in %d ms (%d bytes)",
            _elapsed_ms(start),
            self._file_size(output_file),
        )

    async def _optimize_png(self, png_file: Path) -> None:
        """Losslessly shrink *png_file* with oxipng; failures are only logged."""
        start = time.monotonic()
        command = [
            os.fspath(self.oxipng_binary_path),
            "--opt",
            "2",
            "--strip",
            "safe",
            os.fspath(png_file),
        ]
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                stdin=DEVNULL,
                stdout=PIPE,
                stderr=PIPE,
                env=_preserved_env("PATH"),
            )
            stdout, stderr = await process.communicate()
        except OSError as exc:
            logger.warning(
                "Failed to execute oxipng at %s, continuing with unoptimized image %s: %s",
                self.oxipng_binary_path,
                png_file,
                exc,
            )
            return

        if process.returncode == 0:
            logger.debug("PNG optimization completed in %d ms", _elapsed_ms(start))
        else:
            logger.warning(
                "PNG optimization of %s failed (exit code %s), continuing with "
                "unoptimized image: %s %s",
                png_file,
                process.returncode,
                stderr.decode("utf-8", errors="replace"),
                stdout.decode("utf-8", errors="replace"),
            )