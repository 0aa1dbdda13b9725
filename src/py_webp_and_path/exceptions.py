"""异常处理模块。

定义统一的异常类和错误处理机制，包含图像处理异常处理装饰器。
"""

from collections.abc import Callable, Sequence
from functools import wraps
from pathlib import Path
from typing import TypeVar

from PIL.Image import DecompressionBombError, UnidentifiedImageError

from .models.pipeline_result import PhaseOutcome, PipelineStage
from .utils.logging_helpers import get_logger
from .utils.message_formatter import MessageFormatter


logger = get_logger()
T = TypeVar("T")


# 统一的异常类型
class WebpPathError(Exception):
    """图片转换与路径替换错误基类"""

    def __init__(self, message: str, input_path: Path | None = None):
        super().__init__(message)
        self.message = message
        self.input_path = input_path


class ValidationError(WebpPathError):
    """参数验证错误"""

    pass


class ConversionError(WebpPathError):
    """图片转换错误"""

    pass


class UnsupportedFormatError(ConversionError):
    """不支持的格式错误"""

    pass


class DeletionError(WebpPathError):
    """删除原始图片错误

    删除阶段会尝试所有文件，结束后汇总失败的文件一并抛出。
    """

    def __init__(self, failures: Sequence[tuple[Path, Exception]]):
        self.failures = list(failures)
        detail = "; ".join(f"{path}: {error}" for path, error in self.failures)
        super().__init__(
            f"{len(self.failures)} 个文件删除失败: {detail}",
            self.failures[0][0] if self.failures else None,
        )


class RewriteError(WebpPathError):
    """文本文件读写错误"""

    pass


def handle_image_errors(operation_name: str = "图片转换"):
    """统一的图像处理异常处理装饰器

    被装饰函数的第一个参数（self 之后）应为输入文件路径，用于错误上下文。

    Args:
        operation_name: 操作名称，用于日志记录
    """

    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        @wraps(func)
        def wrapper(self, input_path: Path, *args, **kwargs) -> T:
            try:
                return func(self, input_path, *args, **kwargs)
            except WebpPathError:
                raise
            except UnidentifiedImageError as e:
                logger.debug(f"{operation_name} - 无法识别图像格式: {e}")
                raise UnsupportedFormatError(
                    f"不支持的图像格式: {e}", input_path
                ) from e
            except DecompressionBombError as e:
                logger.debug(f"{operation_name} - 图像过大: {e}")
                raise ConversionError(
                    f"图像文件过大，可能存在安全风险: {e}", input_path
                ) from e
            except OSError as e:
                logger.debug(f"{operation_name} - 文件操作失败: {e}")
                raise ConversionError(f"文件操作失败: {e}", input_path) from e
            except (ValueError, TypeError) as e:
                logger.debug(f"{operation_name} - 参数错误: {e}")
                raise ConversionError(f"参数错误: {e}", input_path) from e

        return wrapper

    return decorator


class ErrorHandler:
    """统一错误处理器

    把阶段内抛出的异常转换为失败的阶段结果。
    """

    @staticmethod
    def _log_error(operation: str, path: Path | str, error: Exception) -> None:
        """标准化的错误日志记录

        面向用户的错误行由流水线日志输出端负责，这里只记录诊断信息。
        """
        log_msg = MessageFormatter.format_error(operation, path, error)
        logger.debug(log_msg)

    @staticmethod
    def describe(error: Exception) -> str:
        """生成面向用户的错误描述"""
        match error:
            case WebpPathError() as wpe if wpe.input_path is not None:
                return f"{wpe.message} [{wpe.input_path}]"
            case WebpPathError() as wpe:
                return wpe.message
            case FileNotFoundError() as fnfe:
                return MessageFormatter.file_not_found(fnfe.filename or fnfe)
            case PermissionError() as pe:
                return f"权限错误: {pe}"
            case OSError() as ose:
                return f"系统错误: {ose}"
            case _:
                return str(error) or type(error).__name__

    @staticmethod
    def phase_failed(
        stage: PipelineStage, error: Exception, target: Path | str = ""
    ) -> PhaseOutcome:
        """创建失败的阶段结果

        Args:
            stage: 未能到达的状态
            error: 异常对象
            target: 相关路径（用于日志）

        Returns:
            PhaseOutcome: 失败的阶段结果
        """
        ErrorHandler._log_error(f"阶段 {stage.value}", target, error)
        return PhaseOutcome(
            stage=stage,
            success=False,
            error=ErrorHandler.describe(error),
        )
