"""
CSV出力モジュール

Exif抽出結果をカレントディレクトリの exif_output.csv に書き出します。
1行目は作成日時のコメント行で、以降はファイルごとに1行（列数はタグ数により可変）です。
"""

import csv
import logging
import os
from datetime import datetime
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from .exceptions import FileOperationError


OUTPUT_FILENAME = 'exif_output.csv'
TIMESTAMP_MARKER = '# csv_created_at:'


class CsvReporter:
    """CSVファイルへの書き出しを担当するクラス"""

    def __init__(self, progress_logger=None):
        """
        CsvReporterを初期化

        Args:
            progress_logger: 完了メッセージを出力するProgressLogger（省略可）
        """
        self.progress_logger = progress_logger
        self.logger = logging.getLogger(__name__)

    def write(self, rows: Iterable[Sequence[str]], now: Optional[datetime] = None) -> Path:
        """
        行データをCSVファイルに書き出す

        既存のファイルは確認なしで上書きします。行ごとの列数は揃えません。

        Args:
            rows: 書き出す行（呼び出し側の順序のまま出力）
            now: タイムスタンプに使う日時（省略時は現在のローカル時刻）

        Returns:
            書き出したCSVファイルのパス

        Raises:
            FileOperationError: ファイルの作成・書き込みに失敗した場合
        """
        output_file = Path(OUTPUT_FILENAME)
        rows_written = 0

        try:
            with open(output_file, 'w', newline='', encoding='utf-8') as f:
                writer = csv.writer(f, lineterminator='\n')
                writer.writerow([self.format_timestamp(now)])

                for row in rows:
                    writer.writerow(row)
                    rows_written += 1

                f.flush()
                os.fsync(f.fileno())

        except OSError as e:
            error_msg = f"CSV書き込みエラー: {output_file} - {str(e)}"
            self.logger.debug(error_msg)
            raise FileOperationError(error_msg) from e

        if self.progress_logger:
            self.progress_logger.log_csv_written(output_file, rows_written)
        else:
            self.logger.info(f"EXIFデータを {output_file} に書き出しました")

        return output_file

    @staticmethod
    def format_timestamp(now: Optional[datetime] = None) -> str:
        """
        タイムスタンプ行のフィールドを作成

        Returns:
            "# csv_created_at: 2024-01-02T03:04:05.678901+09:00" 形式の文字列
        """
        if now is None:
            now = datetime.now()
        return f"{TIMESTAMP_MARKER} {now.astimezone().isoformat()}"


def read_data_rows(csv_path: Path) -> List[List[str]]:
    """
    CSVファイルからコメント行を除いたデータ行を読み込む

    Args:
        csv_path: 読み込むCSVファイル

    Returns:
        データ行のリスト
    """
    with open(csv_path, 'r', newline='', encoding='utf-8') as f:
        return [row for row in csv.reader(f) if row and not row[0].startswith('#')]
