"""
コマンドラインインターフェース

JPEG EXIF CSV Exporterのメインエントリーポイントです。
カレントディレクトリのJPEGファイルを処理し、exif_output.csv を作成します。
オプション引数はありません（--help のみ）。
"""

import argparse
import sys
import time
from pathlib import Path

from .csv_reporter import OUTPUT_FILENAME
from .exceptions import ProcessingError
from .exporter import ExifExporter
from .models import ExportConfig


# コンソール出力を読む時間を確保するための終了前の待機時間（秒）
DEFAULT_PAUSE_SECONDS = 30


def create_parser() -> argparse.ArgumentParser:
    """
    コマンドライン引数パーサーを作成

    Returns:
        設定済みのArgumentParser
    """
    return argparse.ArgumentParser(
        prog='jpeg-exif-csv',
        description='カレントディレクトリのJPEGファイルからExif情報を抽出してCSVに書き出すツール',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=f"""
使用例:
  # JPEGファイルのあるディレクトリで実行
  cd /path/to/jpeg/files
  jpeg-exif-csv

出力:
  {OUTPUT_FILENAME}（既存ファイルは上書きされます）
        """
    )


def pause_before_exit(seconds: float, progress_logger=None) -> None:
    """終了前にコンソール出力を読むための待機（0以下なら待機しない）"""
    if seconds <= 0:
        return
    if progress_logger:
        progress_logger.log_pause(seconds)
    time.sleep(seconds)


def run(config: ExportConfig) -> int:
    """
    エクスポートを実行し、最後に待機する

    CSVの書き込みに失敗しても異常終了せず、エラーを表示して待機処理に進みます。

    Args:
        config: エクスポート設定

    Returns:
        終了コード（常に0）
    """
    exporter = None
    try:
        exporter = ExifExporter(config)
        exporter.export()
    except ProcessingError as e:
        print(f"❌ 処理エラー: {e}", file=sys.stderr)
    except Exception as e:
        print(f"❌ 予期しないエラー: {e}", file=sys.stderr)

    pause_before_exit(config.pause_seconds, exporter.progress_logger if exporter else None)
    return 0


def main() -> int:
    """
    メインエントリーポイント

    Returns:
        終了コード（常に0）
    """
    create_parser().parse_args()

    config = ExportConfig(
        scan_dir=Path('.'),
        pause_seconds=DEFAULT_PAUSE_SECONDS
    )
    return run(config)


if __name__ == '__main__':
    sys.exit(main())
