#!/usr/bin/env python3
"""
测试运行脚本
"""
import argparse
import subprocess
import sys


def check_dependencies() -> bool:
    """检查测试依赖"""
    print("🔍 检查测试依赖...")

    required_packages = [
        "pytest",
        "alibabacloud_oss_v2",
        "pydantic_settings"
    ]

    missing_packages = []
    for package in required_packages:
        try:
            __import__(package)
        except ImportError:
            missing_packages.append(package)

    if missing_packages:
        print(f"❌ 缺少依赖包: {', '.join(missing_packages)}")
        print("请运行: pip install -e .[test]")
        return False

    print("✅ 所有依赖包已安装")
    return True


def run_unit_tests(verbose: bool = False, coverage: bool = False) -> bool:
    """运行单元测试"""
    print("\n🧪 运行单元测试...")

    cmd_parts = [sys.executable, "-m", "pytest", "tests/"]

    if verbose:
        cmd_parts.append("-v")

    if coverage:
        cmd_parts.extend([
            "--cov=ossFilesystem",
            "--cov=services",
            "--cov=config",
            "--cov-report=term-missing"
        ])

    result = subprocess.run(cmd_parts)
    return result.returncode == 0


def main():
    parser = argparse.ArgumentParser(description="运行 OSS 文件系统测试")
    parser.add_argument("-v", "--verbose", action="store_true", help="详细输出")
    parser.add_argument("--coverage", action="store_true", help="生成覆盖率报告")
    parser.add_argument("--skip-deps-check", action="store_true", help="跳过依赖检查")
    args = parser.parse_args()

    if not args.skip_deps_check and not check_dependencies():
        return 1

    if run_unit_tests(verbose=args.verbose, coverage=args.coverage):
        print("\n✅ 所有测试通过")
        return 0

    print("\n❌ 测试失败")
    return 1


if __name__ == "__main__":
    sys.exit(main())
