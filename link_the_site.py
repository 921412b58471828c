#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""LinkTheSite 主脚本

链接处理工具的命令行入口，负责：
1. 解析命令行参数
2. 加载和合并配置
3. 读取已渲染的页面并计算每个页面的 slug
4. 通过插件处理每个页面
5. 保存页面和出链索引（links.json）
"""

import argparse
import json
import os
import sys

from config import load_config
from links.crawl_links import LINKS_FIELD
from links.document import BuildCtx, Document
from links.resolver import STRATEGIES
from links.slugs import slugify_file_path
from logger import setup_logger, _
from utils.plugin_manager import PluginManager

logger = setup_logger(__name__)

LINKS_INDEX_FILE = "links.json"


def parse_args(args_list=None):
    """解析命令行参数

    Args:
        args_list: 可选的参数列表，默认读取 sys.argv

    Returns:
        argparse.Namespace: 解析后的参数
    """
    parser = argparse.ArgumentParser(
        description="LinkTheSite - 静态站点链接处理工具"
    )

    parser.add_argument("--input", "-i", type=str, default=None, help="已渲染页面所在目录")
    parser.add_argument("--output", "-o", type=str, default=None, help="输出目录")
    parser.add_argument("--strategy", "-s", choices=STRATEGIES, default=None, help="站内链接解析策略")

    pretty = parser.add_mutually_exclusive_group()
    pretty.add_argument("--pretty-links", dest="pretty_links", action="store_true", default=None,
                        help="站内链接文本只保留最后一段路径")
    pretty.add_argument("--no-pretty-links", dest="pretty_links", action="store_false",
                        help="保留站内链接原始文本")

    parser.add_argument("--new-tab", action="store_true", help="外部链接在新标签页打开")
    parser.add_argument("--lazy-load", action="store_true", help="资源延迟加载")
    parser.add_argument("--no-external-icon", action="store_true", help="不添加外部链接图标")

    # 格式: --plugins plugin_name:+ 或 --plugins plugin_name:-
    parser.add_argument(
        "--plugins",
        type=str,
        nargs="*",
        default=None,
        help="插件配置，格式: plugin_name:+ 或 plugin_name:- (+启用, -禁用)"
    )

    return parser.parse_args(args_list)


def update_config(args, config=None):
    """根据命令行参数更新配置

    Args:
        args: 解析后的命令行参数
        config: 基础配置，默认重新加载配置文件

    Returns:
        dict: 更新后的配置
    """
    if config is None:
        config = load_config()
    links_config = config.setdefault("links", {})

    if args.input:
        config["input_dir"] = args.input
    if args.output:
        config["output_dir"] = args.output
    if args.strategy:
        links_config["markdown_link_resolution"] = args.strategy
    if args.pretty_links is not None:
        links_config["pretty_links"] = args.pretty_links
    if args.new_tab:
        links_config["open_links_in_new_tab"] = True
    if args.lazy_load:
        links_config["lazy_load"] = True
    if args.no_external_icon:
        links_config["external_link_icon"] = False

    if args.plugins is not None:
        plugins_config = config.setdefault("plugins", {})
        for plugin_setting in args.plugins:
            if ":" in plugin_setting:
                plugin_name, action = plugin_setting.rsplit(":", 1)
                plugins_config[plugin_name] = (action == "+")
            else:
                # 默认启用
                plugins_config[plugin_setting] = True

    return config


def read_documents(input_dir):
    """读取目录下所有 HTML 页面

    Args:
        input_dir: 页面目录

    Returns:
        list: Document 列表，slug 由相对路径计算
    """
    documents = []
    for root, _dirs, files in os.walk(input_dir):
        for filename in sorted(files):
            if not filename.endswith(".html"):
                continue
            file_path = os.path.join(root, filename)
            rel_path = os.path.relpath(file_path, input_dir)
            with open(file_path, "r", encoding="utf-8") as f:
                document = Document.from_html(f.read(), slugify_file_path(rel_path))
            document.data["file_path"] = rel_path
            documents.append(document)
    return documents


def write_documents(documents, output_dir):
    """保存处理后的页面和出链索引

    Args:
        documents: Document 列表
        output_dir: 输出目录

    Returns:
        str: 出链索引文件路径
    """
    for document in documents:
        file_path = os.path.join(output_dir, document.data["file_path"])
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        with open(file_path, "w", encoding="utf-8") as f:
            f.write(document.render())

    index = {
        document.slug: sorted(document.data.get(LINKS_FIELD, []))
        for document in documents
    }
    index_path = os.path.join(output_dir, LINKS_INDEX_FILE)
    with open(index_path, "w", encoding="utf-8") as f:
        json.dump(index, f, ensure_ascii=False, indent=2, sort_keys=True)
    return index_path


def main(args_list=None):
    """主函数

    Args:
        args_list: 可选的参数列表

    Returns:
        int: 退出码
    """
    args = parse_args(args_list)
    config = update_config(args)

    input_dir = config["input_dir"]
    output_dir = config["output_dir"]
    if not os.path.isdir(input_dir):
        logger.error(_("输入目录不存在") + f": {input_dir}")
        return 1

    plugin_manager = PluginManager(config)
    plugin_manager.discover_plugins()
    plugin_manager.load_plugins()
    plugin_manager.enable_plugins(config.get("plugins", {}))
    if not plugin_manager.enabled_plugins:
        logger.warning(_("没有启用的插件，页面将原样输出"))

    documents = read_documents(input_dir)
    logger.info(_("读取页面") + f": {len(documents)} ({input_dir})")

    ctx = BuildCtx(all_slugs=tuple(document.slug for document in documents))
    plugin_manager.call_hook("on_build_start", ctx)
    for document in documents:
        plugin_manager.call_hook("on_transform_document", document)
    plugin_manager.call_hook("on_build_end", documents)

    os.makedirs(output_dir, exist_ok=True)
    index_path = write_documents(documents, output_dir)
    logger.info(_("出链索引已保存") + f": {index_path}")

    plugin_manager.cleanup()
    return 0


if __name__ == "__main__":
    sys.exit(main())
