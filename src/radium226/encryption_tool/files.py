from contextlib import contextmanager, ExitStack
from typing import Generator, TypeAlias
from tempfile import mkstemp
from pathlib import Path
import os



Content: TypeAlias = str | bytes



@contextmanager
def create_temp_file(folder_path: Path, suffix: str = ".tmp") -> Generator[Path, None, None]:
    file_descriptor, temp_file_path_str = mkstemp(dir=folder_path, suffix=suffix)
    os.close(file_descriptor)
    temp_file_path = Path(temp_file_path_str)
    try:
        yield temp_file_path
    finally:
        temp_file_path.unlink(missing_ok=True)



def write_all_atomically(contents: list[tuple[Path, Content, int]]) -> None:
    # Nothing is renamed until every temporary file is written
    with ExitStack() as exit_stack:
        temp_file_paths: list[Path] = []
        for file_path, content, mode in contents:
            file_path.parent.mkdir(parents=True, exist_ok=True)
            temp_file_path = exit_stack.enter_context(create_temp_file(file_path.parent))
            temp_file_path.chmod(mode)
            if isinstance(content, bytes):
                temp_file_path.write_bytes(content)
            else:
                temp_file_path.write_text(content, encoding="utf-8")
            temp_file_paths.append(temp_file_path)

        for (file_path, _, _), temp_file_path in zip(contents, temp_file_paths):
            os.replace(temp_file_path, file_path)



def write_atomically(file_path: Path, content: Content, *, mode: int = 0o644) -> None:
    write_all_atomically([(file_path, content, mode)])
