"""
Exif情報読み取りモジュール

JPEGファイルからExif情報（MIMEタイプとExifタグの一覧）を読み取る機能を提供します。
ExifToolを外部コマンドとして実行してExif情報を取得します。
各ファイルは1回だけ読み取り、キャッシュや再試行は行いません。
"""

import json
import logging
import shutil
import subprocess
import sys
from pathlib import Path
from typing import Any, List, Optional, Tuple

from .exceptions import ExifReadError
from .models import ExifRecord, display_path


class ExifReader:
    """ExifTool を使用したExif情報読み取りクラス"""

    # ExifToolのJSON出力のうち、Exifタグとして扱わないキー
    _NON_TAG_KEYS = ('SourceFile', 'MIMEType', 'Error', 'Warning')

    def __init__(self, exiftool_path: Optional[Path] = None,
                 timeout: Optional[float] = 30):
        """
        ExifReaderを初期化

        Args:
            exiftool_path: ExifToolの実行ファイル（Noneの場合は自動検索）
            timeout: 1ファイルあたりのExifTool実行タイムアウト（秒、Noneで無制限）
        """
        self.logger = logging.getLogger(__name__)
        self.timeout = timeout
        self.exiftool_path: Optional[Path] = exiftool_path

        # ExifToolの初期化チェック
        if self.exiftool_path is None:
            self._check_exiftool_availability()

    def _check_exiftool_availability(self) -> None:
        """ExifToolが利用可能かチェックし、パスを設定"""
        try:
            self.exiftool_path = self._find_exiftool()
            # ExifToolのバージョンを確認
            result = subprocess.run(
                [str(self.exiftool_path), '-ver'],
                capture_output=True,
                text=True,
                timeout=10
            )
            if result.returncode == 0:
                version = result.stdout.strip()
                self.logger.debug(f"ExifTool が見つかりました: {self.exiftool_path} (バージョン: {version})")
            else:
                raise ExifReadError("ExifTool の実行に失敗しました")

        except Exception as e:
            error_msg = (
                "ExifTool が見つかりません。以下の方法でインストールしてください:\n"
                "Windows: https://exiftool.org/ からダウンロードしてPATHに追加\n"
                "macOS: brew install exiftool\n"
                "Linux: sudo apt-get install libimage-exiftool-perl (Ubuntu/Debian)"
            )
            self.logger.error(error_msg)
            raise ExifReadError(error_msg) from e

    def _find_exiftool(self) -> Path:
        """ExifToolの実行可能ファイルを検索"""
        # システムPATHから検索
        exiftool_name = 'exiftool.exe' if sys.platform == 'win32' else 'exiftool'
        exiftool_path = shutil.which(exiftool_name)

        if exiftool_path:
            return Path(exiftool_path)

        # 一般的なインストール場所を検索
        if sys.platform == 'win32':
            common_paths = [
                Path('C:/Windows/exiftool.exe'),
                Path('C:/Program Files/exiftool/exiftool.exe'),
                Path('C:/Program Files (x86)/exiftool/exiftool.exe'),
            ]
        else:
            common_paths = [
                Path('/usr/local/bin/exiftool'),
                Path('/usr/bin/exiftool'),
                Path('/opt/homebrew/bin/exiftool'),  # Apple Silicon Mac
            ]

        for path in common_paths:
            if path.exists() and path.is_file():
                return path

        raise FileNotFoundError("ExifTool が見つかりません")

    def read_exif(self, file_path: Path) -> ExifRecord:
        """
        ファイルからExif情報を読み取る

        拡張子の再確認は行わず、JPEGかどうかの判定はExifToolに任せます。

        Args:
            file_path: 読み取り対象のファイルパス

        Returns:
            MIMEタイプとExifタグ一覧（ExifToolの出力順）を持つExifRecord

        Raises:
            ExifReadError: 破損ファイル・未対応形式・I/Oエラーなどで読み取れない場合
        """
        exif_data = self._run_exiftool(file_path)

        error = self._find_value(exif_data, 'Error')
        if error is not None:
            raise ExifReadError(f"{display_path(file_path)}: {error}")

        mime_type = self._find_value(exif_data, 'MIMEType')
        if not mime_type:
            raise ExifReadError(f"{display_path(file_path)}: MIMEタイプを判定できません")

        entries = self._extract_entries(exif_data)
        self.logger.debug(f"Exifタグを取得: {file_path} ({len(entries)}個)")

        return ExifRecord(path=file_path, mime_type=str(mime_type), entries=entries)

    @staticmethod
    def _find_value(exif_data: List[Tuple[str, Any]], name: str) -> Any:
        """タグ名（グループ名なし）に一致する最初の値を取得"""
        for tag, value in exif_data:
            if tag == name:
                return value
        return None

    def _extract_entries(self, exif_data: List[Tuple[str, Any]]) -> List[Tuple[str, str]]:
        """ExifToolの出力から (タグ名, 値) の一覧を出力順に取り出す（重複タグも保持）"""
        return [
            (tag, self._format_value(value))
            for tag, value in exif_data
            if tag not in self._NON_TAG_KEYS
        ]

    @staticmethod
    def _format_value(value: Any) -> str:
        """JSONの値を表示用の文字列に変換"""
        if isinstance(value, list):
            return ', '.join(str(item) for item in value)
        return str(value)

    @staticmethod
    def _strip_group(key: str) -> str:
        """「IFD0:Make」のようなグループ付きのキーからタグ名を取り出す"""
        return key.rpartition(':')[2]

    def _run_exiftool(self, file_path: Path) -> List[Tuple[str, Any]]:
        """
        ExifToolを実行してExif情報を取得

        -a で重複タグ（IFD0とIFD1の XResolution など）も出力させ、-G1 でキーにグループ名を付けて
        JSONのキーが重複しないようにします。

        Args:
            file_path: 読み取り対象のファイルパス

        Returns:
            (タグ名, 値) のリスト（ExifToolの出力順を保持、タグ名からグループ名は除去）

        Raises:
            ExifReadError: ExifTool実行でエラーが発生した場合
        """
        if not self.exiftool_path:
            raise ExifReadError("ExifTool が初期化されていません")

        # "-" で始まるファイル名がオプションとして解釈されないよう絶対パスで渡す
        cmd = [str(self.exiftool_path), '-j', '-a', '-G1', '-File:MIMEType', '-EXIF:All',
               str(file_path.absolute())]

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                encoding='utf-8',
                errors='replace'
            )
        except subprocess.TimeoutExpired:
            raise ExifReadError(f"ExifTool実行がタイムアウトしました: {display_path(file_path)}")
        except OSError as e:
            raise ExifReadError(f"ExifTool実行中にエラー: {display_path(file_path)} - {e}") from e

        if not result.stdout.strip():
            error_msg = (f"ExifTool実行エラー (終了コード: {result.returncode}): "
                         f"{result.stderr.strip()}")
            raise ExifReadError(error_msg)

        # JSON出力を解析（重複キーを失わないよう (キー, 値) のリストとして読む）
        try:
            json_data = json.loads(result.stdout, object_pairs_hook=list)
        except json.JSONDecodeError as e:
            raise ExifReadError(f"ExifTool JSON出力の解析エラー: {str(e)}") from e

        if not json_data or not isinstance(json_data[0], list):
            raise ExifReadError(f"ExifToolの出力が空です: {display_path(file_path)}")

        # 最初のファイルの情報を返す
        return [(self._strip_group(key), value) for key, value in json_data[0]]
