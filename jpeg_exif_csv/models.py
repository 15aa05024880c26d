"""
データモデル定義

JPEG EXIF CSV Exporterで使用するデータクラスを定義します。
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Tuple


def display_path(path: Path) -> str:
    """パスを表示用の文字列に変換（UTF-8で表現できないバイトは U+FFFD に置換）"""
    return str(path).encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')


@dataclass
class ExifRecord:
    """1ファイル分のExif抽出結果"""
    path: Path
    mime_type: str
    entries: List[Tuple[str, str]] = field(default_factory=list)  # (タグ名, 表示用の値)

    @property
    def tag_count(self) -> int:
        return len(self.entries)

    def to_row(self) -> List[str]:
        """
        CSVの1行に変換

        Returns:
            [パス, MIMEタイプ, タグ数, "タグ: 値", ...] の形式のリスト
        """
        row = [display_path(self.path), self.mime_type, str(self.tag_count)]
        row.extend(f"{tag}: {value}" for tag, value in self.entries)
        return row


@dataclass
class RunResult:
    """抽出処理全体の結果"""
    records: List[ExifRecord]  # 入力順（ソート済み）を保持
    failures: List[Tuple[Path, str]] = field(default_factory=list)

    def rows(self) -> List[List[str]]:
        return [record.to_row() for record in self.records]


@dataclass
class ExportStats:
    """処理統計情報"""
    jpeg_files_found: int
    rows_written: int
    files_failed: int
    errors: List[Tuple[str, str]]  # (file_path, error_message)


@dataclass
class ExportConfig:
    """エクスポート設定"""
    scan_dir: Path = Path('.')
    max_workers: int = 4
    exiftool_timeout: Optional[float] = 30
    pause_seconds: float = 0
    verbose: bool = False
    log_file: Optional[Path] = None
