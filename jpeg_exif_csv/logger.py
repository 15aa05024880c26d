"""
ロギングシステム

JPEG EXIF CSV Exporterのロギング機能を提供します。
進捗表示は標準出力、警告とエラーは標準エラー出力に表示し、
必要に応じてファイルにも出力します。
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional
from dataclasses import dataclass

from .models import ExportStats


LOGGER_NAME = 'jpeg_exif_csv'


@dataclass
class LogConfig:
    """ログ設定"""
    console_level: int = logging.INFO
    file_level: int = logging.DEBUG
    log_file: Optional[Path] = None
    verbose: bool = False


class _BelowWarningFilter(logging.Filter):
    """WARNING未満のレコードのみを通すフィルター"""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno < logging.WARNING


class ProgressLogger:
    """進捗表示とロギングを管理するクラス"""

    def __init__(self, config: LogConfig):
        self.config = config
        self.logger = self._setup_logger()
        self._start_time: Optional[datetime] = None

    def _setup_logger(self) -> logging.Logger:
        """ロガーのセットアップ"""
        logger = logging.getLogger(LOGGER_NAME)
        logger.setLevel(logging.DEBUG)

        # 既存のハンドラーをクリア
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        # フォーマッターを作成
        console_formatter = logging.Formatter(
            '%(message)s'
        )
        file_formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

        # 進捗は標準出力
        stdout_handler = logging.StreamHandler(sys.stdout)
        stdout_handler.setLevel(self.config.console_level)
        stdout_handler.addFilter(_BelowWarningFilter())
        stdout_handler.setFormatter(console_formatter)
        logger.addHandler(stdout_handler)

        # 警告・エラーは標準エラー出力
        stderr_handler = logging.StreamHandler(sys.stderr)
        stderr_handler.setLevel(max(self.config.console_level, logging.WARNING))
        stderr_handler.setFormatter(console_formatter)
        logger.addHandler(stderr_handler)

        # ファイルハンドラー（指定されている場合）
        if self.config.log_file:
            # ログディレクトリを作成
            self.config.log_file.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(self.config.log_file, encoding='utf-8')
            file_handler.setLevel(self.config.file_level)
            file_handler.setFormatter(file_formatter)
            logger.addHandler(file_handler)

        return logger

    def log_processing_start(self, scan_dir: Path):
        """処理開始時のサマリー表示"""
        self._start_time = datetime.now()

        self.logger.info("=" * 60)
        self.logger.info("JPEG EXIF CSV Exporter - 処理開始")
        self.logger.info("=" * 60)
        self.logger.info(f"開始時刻: {self._start_time.strftime('%Y-%m-%d %H:%M:%S')}")
        self.logger.info(f"スキャン対象ディレクトリ: {scan_dir}")
        self.logger.info("")

    def log_scan_complete(self, jpeg_files_found: int):
        """ファイル検索完了のログ"""
        self.logger.info(f"JPEGファイル発見数: {jpeg_files_found}")

    def log_extraction_start(self, total_files: int, max_workers: int):
        """Exif抽出開始のログ"""
        self.logger.info(f"Exif抽出開始: {total_files}個のファイル (ワーカー数: {max_workers})")

    def log_extraction_progress(self, total_files: int, files_processed: int, current_file: Optional[Path] = None):
        """Exif抽出時の進捗表示"""
        if self.config.verbose and current_file:
            self.logger.info(f"処理中: {current_file.name}")

        if total_files > 0:
            progress = (files_processed / total_files) * 100
            self.logger.debug(f"Exif抽出進捗: {files_processed}/{total_files} ({progress:.1f}%)")

    def log_extraction_complete(self, records_count: int, total_files: int, processing_time: float):
        """Exif抽出完了のログ"""
        self.logger.info(f"Exif抽出完了: {records_count}/{total_files}ファイル")
        self.logger.info(f"処理時間: {processing_time:.2f}秒")
        self.logger.info("")

    def log_csv_written(self, output_file: Path, rows_written: int):
        """CSV出力完了のログ"""
        self.logger.info(f"EXIFデータを {output_file} に書き出しました ({rows_written}行)")

    def log_processing_complete(self, stats: ExportStats):
        """処理完了時のサマリー表示"""
        end_time = datetime.now()
        total_time = (end_time - self._start_time).total_seconds() if self._start_time else 0

        self.logger.info("=" * 60)
        self.logger.info("処理完了サマリー")
        self.logger.info("=" * 60)
        self.logger.info(f"終了時刻: {end_time.strftime('%Y-%m-%d %H:%M:%S')}")
        self.logger.info(f"総処理時間: {total_time:.2f}秒")
        self.logger.info("")
        self.logger.info("処理結果:")
        self.logger.info(f"  - JPEGファイル発見数: {stats.jpeg_files_found}")
        self.logger.info(f"  - CSV出力行数: {stats.rows_written}")
        self.logger.info(f"  - 失敗: {stats.files_failed}")

        if stats.errors:
            self.logger.info("")
            self.logger.info(f"エラー詳細 ({len(stats.errors)}件):")
            for file_path, error_msg in stats.errors:
                self.logger.info(f"  - {file_path}: {error_msg}")

        self.logger.info("=" * 60)

    def log_pause(self, seconds: float):
        """終了前の待機メッセージ"""
        self.logger.info(f"メッセージを確認できるよう {seconds:g}秒間待機します…")

    def log_error(self, file_path: Path, error_message: str, exception: Optional[Exception] = None):
        """エラーログの詳細記録"""
        error_msg = f"エラー - {file_path}: {error_message}"

        if exception:
            error_msg += f" ({type(exception).__name__}: {str(exception)})"

        self.logger.error(error_msg)

        # 詳細なスタックトレースはファイルログのみに記録
        if exception and self.config.log_file:
            self.logger.debug("スタックトレース:", exc_info=exception)

    def log_warning(self, message: str):
        """警告メッセージのログ"""
        self.logger.warning(f"警告: {message}")

    def log_info(self, message: str):
        """情報メッセージのログ"""
        self.logger.info(message)

    def log_debug(self, message: str):
        """デバッグメッセージのログ"""
        self.logger.debug(message)


def create_default_logger(verbose: bool = False, log_file: Optional[Path] = None) -> ProgressLogger:
    """デフォルトのロガーを作成"""
    config = LogConfig(
        console_level=logging.DEBUG if verbose else logging.INFO,
        file_level=logging.DEBUG,
        log_file=log_file,
        verbose=verbose
    )
    return ProgressLogger(config)


def get_default_log_file() -> Path:
    """デフォルトのログファイルパスを取得"""
    log_dir = Path.home() / '.jpeg_exif_csv' / 'logs'
    timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    return log_dir / f'jpeg_exif_csv_{timestamp}.log'
