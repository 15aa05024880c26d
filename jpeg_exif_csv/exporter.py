"""
エクスポート管理モジュール

JPEGファイルの検索、Exif情報の並列抽出、CSV出力を順に実行します。
並列抽出は入力順を保持し、失敗したファイルはログに記録して除外します。
"""

import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Tuple, Union

from .csv_reporter import CsvReporter
from .exceptions import ExifReadError
from .exif_reader import ExifReader
from .file_scanner import FileScanner
from .logger import ProgressLogger, create_default_logger, get_default_log_file
from .models import ExifRecord, ExportConfig, ExportStats, RunResult


class ExifExporter:
    """JPEGファイルのExif情報をCSVに書き出すクラス"""

    def __init__(self, config: Optional[ExportConfig] = None,
                 exif_reader: Optional[ExifReader] = None,
                 file_scanner: Optional[FileScanner] = None,
                 progress_logger: Optional[ProgressLogger] = None):
        """
        ExifExporterを初期化

        Args:
            config: エクスポート設定（Noneの場合はデフォルト）
            exif_reader: Exif読み取りクラス（Noneの場合は新規作成）
            file_scanner: ファイルスキャナークラス（Noneの場合は新規作成）
            progress_logger: ProgressLogger（Noneの場合は設定から作成）
        """
        self.config = config or ExportConfig()

        if progress_logger is None:
            log_file = self.config.log_file
            if log_file is None and self.config.verbose:
                log_file = get_default_log_file()
            progress_logger = create_default_logger(verbose=self.config.verbose, log_file=log_file)
        self.progress_logger = progress_logger

        self.exif_reader = exif_reader or ExifReader(timeout=self.config.exiftool_timeout)
        self.file_scanner = file_scanner or FileScanner()
        self.reporter = CsvReporter(self.progress_logger)

    def export(self) -> ExportStats:
        """
        スキャン・抽出・CSV出力を実行

        Returns:
            処理統計情報

        Raises:
            FileOperationError: CSVの書き込みに失敗した場合
        """
        scan_dir = self.config.scan_dir
        self.progress_logger.log_processing_start(scan_dir)

        # 1. JPEGファイルの検索（.jpeg → .jpg、辞書順ソート）
        jpeg_files = self.file_scanner.scan_jpeg_files(scan_dir)
        self.progress_logger.log_scan_complete(len(jpeg_files))

        # 2. Exif情報の並列抽出
        result = self.extract_all(jpeg_files)

        # 3. CSV出力
        self.reporter.write(result.rows())

        stats = ExportStats(
            jpeg_files_found=len(jpeg_files),
            rows_written=len(result.records),
            files_failed=len(result.failures),
            errors=[(str(path), message) for path, message in result.failures]
        )
        self.progress_logger.log_processing_complete(stats)
        return stats

    def extract_all(self, file_paths: List[Path]) -> RunResult:
        """
        ファイルを並列処理してExif情報を抽出

        結果は完了順ではなく入力順に並びます。

        Args:
            file_paths: 処理するファイルパスのリスト

        Returns:
            抽出に成功したレコードと失敗したファイルの一覧
        """
        start_time = time.time()
        total = len(file_paths)
        max_workers = max(1, self.config.max_workers)
        self.progress_logger.log_extraction_start(total, max_workers)

        records: List[ExifRecord] = []
        failures: List[Tuple[Path, str]] = []

        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            # executor.map は入力順に結果を返す
            outcomes = executor.map(self._process_single_file, file_paths)

            for processed, (file_path, outcome) in enumerate(zip(file_paths, outcomes), 1):
                if isinstance(outcome, ExifRecord):
                    records.append(outcome)
                else:
                    failures.append((file_path, outcome))
                self.progress_logger.log_extraction_progress(total, processed, file_path)

        self.progress_logger.log_extraction_complete(
            len(records), total, time.time() - start_time)
        return RunResult(records=records, failures=failures)

    def _process_single_file(self, file_path: Path) -> Union[ExifRecord, str]:
        """
        単一ファイルのExif情報を抽出

        Args:
            file_path: 処理するファイルパス

        Returns:
            成功時はExifRecord、失敗時はエラーの説明
        """
        try:
            return self.exif_reader.read_exif(file_path)
        except ExifReadError as e:
            self.progress_logger.log_error(file_path, f"Exif情報を解析できませんでした: {e}")
            return str(e)
        except Exception as e:
            self.progress_logger.log_error(file_path, "Exif情報を解析できませんでした", e)
            return str(e)
