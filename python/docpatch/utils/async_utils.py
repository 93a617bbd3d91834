import asyncio
from pathlib import Path


async def readfile(path: Path) -> str:
    """Asynchronously read file on a path and return its content."""

    def readfile_sync(path: Path) -> str:
        with path.open("r", encoding="utf8") as file:
            return file.read()

    return await asyncio.to_thread(readfile_sync, path)


async def writefile(path: Path, content: str) -> None:
    """Asynchronously set content of a file on path to a given string content."""

    def writefile_sync(path: Path, content: str) -> int:
        with path.open("w", encoding="utf8") as file:
            return file.write(content)

    await asyncio.to_thread(writefile_sync, path, content)
