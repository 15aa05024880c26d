#!/usr/bin/env python3
"""
JPEG EXIF CSV Exporter - 基本的な使用例

このスクリプトは、JPEG EXIF CSV Exporterをプログラムから呼び出す方法を示します。
コマンドラインの jpeg-exif-csv と異なり、スキャン対象ディレクトリを指定でき、終了前の待機もありません。
"""

import sys
from pathlib import Path

from jpeg_exif_csv import ExifExporter, ExportConfig, FileScanner, ExifReader, ProcessingError
from jpeg_exif_csv.csv_reporter import OUTPUT_FILENAME, read_data_rows


def example_export_directory():
    """ディレクトリ内のJPEGファイルをCSVに書き出す例"""
    print("=" * 60)
    print("JPEG EXIF CSV Exporter - 基本的な使用例")
    print("=" * 60)

    # 例用のディレクトリパス（実際の使用時は適切なパスに変更してください）
    photo_directory = Path("~/Photos/Selected_JPEGs").expanduser()

    if not photo_directory.exists():
        print(f"⚠️  ディレクトリが存在しません: {photo_directory}")
        print("実際のディレクトリパスに変更してください。")
        return

    config = ExportConfig(scan_dir=photo_directory, max_workers=8, verbose=True)

    try:
        stats = ExifExporter(config).export()
    except ProcessingError as e:
        print(f"❌ エラー: {e}")
        return

    print(f"CSV出力行数: {stats.rows_written} / JPEGファイル数: {stats.jpeg_files_found}")

    # コメント行を除いたデータ行を読み込む
    for row in read_data_rows(Path(OUTPUT_FILENAME))[:5]:
        print(f"  {row[0]}: {row[2]}個のタグ")


def example_single_file(file_path: Path):
    """1ファイルのExif情報を表示する例"""
    try:
        record = ExifReader().read_exif(file_path)
    except ProcessingError as e:
        print(f"❌ 読み取りエラー: {e}")
        return

    print(f"{file_path} ({record.mime_type}, {record.tag_count}個のタグ)")
    for tag, value in record.entries:
        print(f"  {tag}: {value}")


def example_list_jpeg_files():
    """カレントディレクトリのJPEGファイル一覧を表示する例"""
    for file_path in FileScanner().scan_jpeg_files(Path('.')):
        print(f"  - {file_path}")


if __name__ == '__main__':
    if len(sys.argv) > 1:
        example_single_file(Path(sys.argv[1]))
    else:
        example_list_jpeg_files()
        example_export_directory()
