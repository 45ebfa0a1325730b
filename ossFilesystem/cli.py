import argparse
import sys
from datetime import datetime
from typing import List, Optional

from config import get_oss_settings

from .interface import Visibility
from .oss_client import create_adapter


def build_parser() -> argparse.ArgumentParser:
    """创建命令行参数解析器"""
    parser = argparse.ArgumentParser(prog="oss-fs", description="Aliyun OSS filesystem tool")
    parser.add_argument('--region', help='The region in which the bucket is located.')
    parser.add_argument('--bucket', help='The name of the bucket.')
    parser.add_argument('--endpoint', help='The domain names that other services can use to access OSS')
    parser.add_argument('--prefix', help='Path prefix applied to every key')

    subparsers = parser.add_subparsers(dest='command', required=True)

    ls = subparsers.add_parser('ls', help='List directory contents')
    ls.add_argument('directory', nargs='?', default='')
    ls.add_argument('-r', '--recursive', action='store_true', help='List recursively')

    cat = subparsers.add_parser('cat', help='Print file contents')
    cat.add_argument('path')

    stat = subparsers.add_parser('stat', help='Show file metadata')
    stat.add_argument('path')

    put = subparsers.add_parser('put', help='Upload a local file')
    put.add_argument('local')
    put.add_argument('remote')
    put.add_argument('--content-type', help='Content-Type of the uploaded object')

    cp = subparsers.add_parser('cp', help='Copy a file')
    cp.add_argument('path')
    cp.add_argument('newpath')

    mv = subparsers.add_parser('mv', help='Rename a file (copy then delete)')
    mv.add_argument('path')
    mv.add_argument('newpath')

    rm = subparsers.add_parser('rm', help='Delete a file')
    rm.add_argument('path')

    mkdir = subparsers.add_parser('mkdir', help='Create a directory marker')
    mkdir.add_argument('dirname')

    rmdir = subparsers.add_parser('rmdir', help='Delete a directory recursively')
    rmdir.add_argument('dirname')

    acl = subparsers.add_parser('acl', help='Get or set file visibility')
    acl.add_argument('action', choices=['get', 'set'])
    acl.add_argument('path')
    acl.add_argument('visibility', nargs='?', choices=[v.value for v in Visibility])

    return parser


def _format_timestamp(timestamp: Optional[int]) -> str:
    if timestamp is None:
        return '-'
    return datetime.fromtimestamp(timestamp).strftime("%Y-%m-%d %H:%M:%S")


def run(args: argparse.Namespace) -> int:
    """执行子命令"""
    overrides = {
        name: getattr(args, name)
        for name in ('region', 'bucket', 'endpoint', 'prefix')
        if getattr(args, name) is not None
    }
    oss_settings = get_oss_settings().model_copy(update=overrides)
    fs = create_adapter(oss_settings)

    if args.command == 'ls':
        contents = fs.list_contents(args.directory, args.recursive)
        for entry in contents:
            if entry['type'] == 'dir':
                print(f"  📁 {entry['path']}/")
            else:
                print(f"  📄 {entry['path']} ({entry.get('size', 0)} bytes, {_format_timestamp(entry.get('timestamp'))})")
        print(f"✅ 总计条目数量: {len(contents)}")
        return 0

    if args.command == 'cat':
        file = fs.read(args.path)
        if file is None:
            print(f"❌ 文件不存在: {args.path}")
            return 1
        sys.stdout.buffer.write(file['contents'])
        sys.stdout.flush()
        return 0

    if args.command == 'stat':
        metadata = fs.get_metadata(args.path)
        if metadata is None:
            print(f"❌ 文件不存在: {args.path}")
            return 1
        print(f"  路径: {metadata['path']}")
        print(f"  内容长度: {metadata.get('size', '-')}")
        print(f"  内容类型: {metadata.get('mimetype', '-')}")
        print(f"  最后修改时间: {_format_timestamp(metadata.get('timestamp'))}")
        return 0

    if args.command == 'put':
        config = {'ContentType': args.content_type} if args.content_type else None
        with open(args.local, 'rb') as f:
            file = fs.write_stream(args.remote, f, config)
        print(f"✅ 上传成功: {args.local} -> {file['path']} ({file['size']} bytes)")
        return 0

    if args.command == 'cp':
        fs.copy(args.path, args.newpath)
        print(f"✅ 复制成功: {args.path} -> {args.newpath}")
        return 0

    if args.command == 'mv':
        fs.rename(args.path, args.newpath)
        print(f"✅ 重命名成功: {args.path} -> {args.newpath}")
        return 0

    if args.command == 'rm':
        fs.delete(args.path)
        print(f"✅ 删除成功: {args.path}")
        return 0

    if args.command == 'mkdir':
        if not fs.create_dir(args.dirname):
            print(f"❌ 创建目录失败: {args.dirname}")
            return 1
        print(f"✅ 创建目录成功: {args.dirname}")
        return 0

    if args.command == 'rmdir':
        if not fs.delete_dir(args.dirname):
            print(f"❌ 删除目录失败: {args.dirname}")
            return 1
        print(f"✅ 删除目录成功: {args.dirname}")
        return 0

    if args.command == 'acl':
        if args.action == 'get':
            result = fs.get_visibility(args.path)
            if result is None:
                print(f"❌ 文件不存在: {args.path}")
                return 1
            visibility = result['visibility']
            print(f"  可见性: {getattr(visibility, 'value', visibility)}")
            return 0

        if not args.visibility:
            print("❌ 请指定可见性: public 或 private")
            return 1
        if not fs.set_visibility(args.path, args.visibility):
            print(f"❌ 设置可见性失败: {args.path}")
            return 1
        print(f"✅ 设置可见性成功: {args.path} -> {args.visibility}")
        return 0

    return 1


def main(argv: Optional[List[str]] = None) -> int:
    """命令行入口函数"""
    args = build_parser().parse_args(argv)

    try:
        return run(args)
    except Exception as e:
        print(f"❌ 操作失败: {str(e)}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
