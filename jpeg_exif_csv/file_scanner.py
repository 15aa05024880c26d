"""
ファイルスキャナー

ディレクトリをスキャンしてJPEGファイルを検索する機能を提供します。
サブディレクトリは検索しません。
"""

import logging
from pathlib import Path
from typing import List, Tuple


class FileScanner:
    """ディレクトリをスキャンしてファイルを検索するクラス"""

    # 検索対象の拡張子（ドットなし、この順にスキャンする）
    JPEG_EXTENSIONS: Tuple[str, ...] = ('jpeg', 'jpg')

    def __init__(self):
        """FileScannerを初期化"""
        self.logger = logging.getLogger(__name__)

    def scan_files(self, directory: Path, extension: str) -> List[Path]:
        """
        ディレクトリ直下から指定拡張子のファイルを検索

        拡張子は大文字小文字を区別せずに完全一致で比較します
        （"jpg" は "a.JPG" にマッチし、"a.jpeg" にはマッチしない）。
        ディレクトリを読み取れない場合はエラーにせず空のリストを返します。

        Args:
            directory: スキャンするディレクトリ
            extension: 拡張子（先頭のドットなし）

        Returns:
            見つかったファイルのパスのリスト（順序は不定）
        """
        target = extension.lower()
        found = []

        try:
            entries = list(directory.iterdir())
        except OSError as e:
            self.logger.warning(f"警告: ディレクトリを読み取れません: {directory} - {e}")
            return []

        for file_path in entries:
            # ディレクトリやディレクトリへのシンボリックリンクは除外
            if not self._is_regular_file(file_path):
                continue
            if self.get_extension(file_path) == target:
                found.append(file_path)

        return found

    def scan_jpeg_files(self, directory: Path) -> List[Path]:
        """
        ディレクトリ直下のJPEGファイル（.jpeg / .jpg）を検索

        Args:
            directory: スキャンするディレクトリ

        Returns:
            見つかったJPEGファイルのパスのリスト（辞書順ソート済み）
        """
        jpeg_files = []
        for extension in self.JPEG_EXTENSIONS:
            jpeg_files.extend(self.scan_files(directory, extension))

        return sorted(jpeg_files)

    def get_extension(self, file_path: Path) -> str:
        """
        ファイルパスから拡張子（ドットなし、小文字）を取得

        Args:
            file_path: ファイルパス

        Returns:
            拡張子（拡張子がない場合は空文字列）
        """
        return file_path.suffix[1:].lower()

    @staticmethod
    def _is_regular_file(file_path: Path) -> bool:
        try:
            return file_path.is_file()
        except OSError:
            return False
