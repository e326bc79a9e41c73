"""
lectio · 配置

所有路径均使用 pathlib 动态拼接，零硬编码。
支持项目根目录下的 .env 文件覆盖默认值。
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# ─── 包目录 / 项目根目录 ─────────────────────────────────────
# src/lectio/config.py → 上两级就是项目根
PACKAGE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = PACKAGE_DIR.parent.parent

load_dotenv(PROJECT_ROOT / ".env")

# ─── 交叉引用 ────────────────────────────────────────────────
# 形如 "I-1.372" 的前缀，以及生成链接时使用的默认作品 slug
CROSS_REF_PREFIX = os.getenv("LECTIO_CROSS_REF_PREFIX", "I")
CROSS_REF_DEFAULT_SLUG = os.getenv("LECTIO_CROSS_REF_SLUG", "tlg0012.tlg001")

# ─── 模板 ────────────────────────────────────────────────────
# 内置模板随包发布；LECTIO_TEMPLATES_DIR 可指定覆盖目录（优先查找）
DEFAULT_TEMPLATES_DIR = PACKAGE_DIR / "templates"
_templates_override = os.getenv("LECTIO_TEMPLATES_DIR", "")
TEMPLATES_DIR = Path(_templates_override) if _templates_override else None


# ─── 配置摘要（调试用） ──────────────────────────────────────
def print_config():
    """打印当前配置，用于调试"""
    print("=" * 50)
    print("lectio · 配置")
    print("=" * 50)
    print(f"  项目根目录:    {PROJECT_ROOT}")
    print(f"  交叉引用前缀:  {CROSS_REF_PREFIX}")
    print(f"  默认作品 slug: {CROSS_REF_DEFAULT_SLUG}")
    print(f"  内置模板:      {DEFAULT_TEMPLATES_DIR}")
    if TEMPLATES_DIR is not None:
        print(f"  覆盖模板:      {TEMPLATES_DIR}  {'✓' if TEMPLATES_DIR.exists() else '✗'}")
    print("=" * 50)


if __name__ == "__main__":
    print_config()
