#!/usr/bin/env python3
"""
FastMySQLSum 主入口脚本
使用方法:
  python main.py slowlog    # 按阈值过滤慢查询日志
  python main.py summary    # 生成服务器状态汇总报告
  python main.py --help     # 查看帮助
"""
import sys
import argparse
from pathlib import Path

# 添加src目录到Python路径
sys.path.insert(0, str(Path(__file__).parent / "src"))


def validate_directory_exists(path_str: str, param_name: str) -> Path:
    """验证目录是否存在并返回Path对象"""
    path = Path(path_str)
    if not path.is_dir():
        raise ValueError(f"{param_name} 目录不存在: {path_str}")
    return path


def validate_file_exists(path_str: str, param_name: str) -> Path:
    """验证文件是否存在并返回Path对象"""
    path = Path(path_str)
    if not path.is_file():
        raise ValueError(f"{param_name} 文件不存在: {path_str}")
    return path


def validate_parent_directory_exists(path_str: str, param_name: str) -> Path:
    """验证父目录是否存在并返回Path对象"""
    path = Path(path_str)
    if not path.parent.exists():
        raise ValueError(f"{param_name} 的父目录不存在: {path.parent}")
    return path


def handle_slowlog_command(args) -> int:
    """处理slowlog命令"""
    try:
        if args.T is None and args.R is None:
            print("❌ 错误：必须至少指定 -T 或 -R 参数之一", file=sys.stderr)
            return 1

        from fastmysqlsum.report.api import filter_slow_log
        from fastmysqlsum.report.mysql.slowlog import render_summary

        if not args.quiet:
            print("\n Starting... \n", file=sys.stderr)

        out = sys.stdout
        if args.out:
            out_path = validate_parent_directory_exists(args.out, "-out")
            out = open(out_path, 'w', encoding='utf-8')

        try:
            if args.import_log:
                log_path = validate_file_exists(args.import_log, "-import_log")
                with open(log_path, 'r', encoding='utf-8', errors='ignore') as f:
                    summary = filter_slow_log(f, out, min_time=args.T, min_rows=args.R)
            else:
                summary = filter_slow_log(sys.stdin, out, min_time=args.T, min_rows=args.R)
        finally:
            if out is not sys.stdout:
                out.close()

        if not args.quiet:
            print("\n".join(render_summary(summary)), file=sys.stderr)

        return 0

    except ValueError as e:
        print(f"❌ 参数验证失败: {e}", file=sys.stderr)
        return 1
    except ImportError as e:
        print(f"❌ 导入模块失败: {e}", file=sys.stderr)
        print("请确保fastmysqlsum包正确安装", file=sys.stderr)
        return 1
    except OSError as e:
        print(f"❌ Slowlog命令执行失败: {e}", file=sys.stderr)
        return 1


def handle_summary_command(args) -> int:
    """处理summary命令"""
    try:
        if not args.import_dir:
            print("❌ 错误：-import_dir 参数不能为空", file=sys.stderr)
            return 1

        import_dir = validate_directory_exists(args.import_dir, "-import_dir")
        if args.out:
            validate_parent_directory_exists(args.out, "-out")

        from fastmysqlsum.report.api import generate_summary_report

        if not args.quiet and args.out:
            print(f"开始生成汇总报告...")
            print(f"  采集目录: {import_dir}")

        success = generate_summary_report(
            import_dir=str(import_dir),
            output_file=args.out,
            as_json=args.json,
            hostname=args.hostname,
            quiet=args.quiet,
        )

        if success:
            if not args.quiet and args.out:
                print("✅ 汇总报告生成成功！")
            return 0
        else:
            print("❌ 汇总报告生成失败，请检查日志", file=sys.stderr)
            return 1

    except ValueError as e:
        print(f"❌ 参数验证失败: {e}", file=sys.stderr)
        return 1
    except ImportError as e:
        print(f"❌ 导入模块失败: {e}", file=sys.stderr)
        print("请确保fastmysqlsum包正确安装", file=sys.stderr)
        return 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='FastMySQLSum - MySQL 诊断文本汇总工具',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
子命令:
  slowlog   按 Query_time / Rows_examined 阈值过滤慢查询日志
  summary   从采集目录生成服务器状态汇总报告

Slowlog命令示例:
  python main.py slowlog -T 2 -R 100000 -import_log /var/log/mysql/slow.log
  python main.py slowlog -T 5 < slow.log > slow-5s.log

Summary命令示例:
  python main.py summary \\
    -import_dir "/path/to/db01_mysql_20250901" \\
    -out "/path/to/report.txt"

  # 输出JSON
  python main.py summary -import_dir "/path/to/capture" --json
        """
    )
    parser.add_argument('--log_dir', type=str, help='日志目录(可选)')

    subparsers = parser.add_subparsers(dest='command', help='可用命令')

    # slowlog子命令
    slowlog_parser = subparsers.add_parser('slowlog', help='按阈值过滤慢查询日志')
    slowlog_parser.add_argument('-T', type=float, help='Query_time 阈值（秒），小于该值的查询被跳过')
    slowlog_parser.add_argument('-R', type=int, help='Rows_examined 阈值，小于该值的查询被跳过')
    slowlog_parser.add_argument('-import_log', type=str, help='慢查询日志文件（默认读取标准输入）')
    slowlog_parser.add_argument('-out', type=str, help='输出文件（默认写到标准输出）')
    slowlog_parser.add_argument('--quiet', action='store_true', help='静默模式')

    # summary子命令
    summary_parser = subparsers.add_parser('summary', help='生成服务器状态汇总报告')
    summary_parser.add_argument('-import_dir', type=str, required=True, help='采集目录')
    summary_parser.add_argument('-out', type=str, help='输出文件（默认写到标准输出）')
    summary_parser.add_argument('--json', action='store_true', help='输出JSON')
    summary_parser.add_argument('--hostname', type=str, help='自定义主机名(可选)')
    summary_parser.add_argument('--quiet', action='store_true', help='静默模式')

    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    from fastmysqlsum.report.common.config import setup_logging
    setup_logging(args.log_dir, quiet=getattr(args, 'quiet', False))

    try:
        if args.command == 'slowlog':
            return handle_slowlog_command(args)
        elif args.command == 'summary':
            return handle_summary_command(args)
    except KeyboardInterrupt:
        print("\n❌ 操作被用户取消", file=sys.stderr)
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
