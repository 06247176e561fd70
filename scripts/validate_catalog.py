#!/usr/bin/env python3
"""
数据验证脚本 - 验证专业录取数据 JSON 文件的格式是否正确

使用方法：
    python scripts/validate_catalog.py
    python scripts/validate_catalog.py --file db/data/majors.json
"""

import json
import os
import sys
from pathlib import Path

# 添加项目根目录到Python路径
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from pydantic import ValidationError

from config import CATALOG_PATH
from matching.subjects import parse_subject_requirement
from models.major import MAJOR_CATEGORIES, SUBJECTS, Major


def validate_records(records):
    """返回 (errors, warnings)，errors 非空时数据不能加载"""
    errors = []
    warnings = []

    if not isinstance(records, list):
        errors.append("❌ 数据文件顶层必须是数组")
        return errors, warnings

    seen = {}
    for idx, record in enumerate(records, start=1):
        try:
            major = Major.model_validate(record)
        except ValidationError as e:
            for err in e.errors():
                field = ".".join(str(part) for part in err["loc"])
                errors.append(f"❌ 第{idx}条: {field} {err['msg']}")
            continue

        label = f"{major.university} {major.major_name}({major.major_code})"
        if major.key in seen:
            errors.append(f"❌ 第{idx}条: {label} 与第{seen[major.key]}条重复")
        else:
            seen[major.key] = idx

        if major.major_category not in MAJOR_CATEGORIES:
            errors.append(f"❌ 第{idx}条: {label} 专业类别 {major.major_category} 不在可选列表中")

        for options in parse_subject_requirement(major.subject_requirements):
            unknown = [s for s in options if s not in SUBJECTS]
            if unknown:
                warnings.append(f"⚠️  第{idx}条: {label} 选科要求无法识别: {major.subject_requirements}")
                break

        if major.admission_ranking_2024 is None:
            warnings.append(f"⚠️  第{idx}条: {label} 缺少2024年录取位次，排序时排在最后")

    return errors, warnings


def validate_file(file_path):
    print(f"\n📋 验证专业数据: {file_path}")
    try:
        with open(file_path, "r", encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        return [f"❌ 无法读取文件: {e}"], []

    errors, warnings = validate_records(records)
    if isinstance(records, list):
        print(f"✅ 检查了 {len(records)} 条数据")
    return errors, warnings


def main():
    import argparse

    parser = argparse.ArgumentParser(description="验证专业录取数据JSON文件")
    parser.add_argument("--file", type=Path, default=CATALOG_PATH, help="数据文件路径")
    args = parser.parse_args()

    errors, warnings = validate_file(args.file)

    # 汇总结果
    print("\n" + "="*60)
    print("📊 验证结果汇总")
    print("="*60)

    if errors:
        print(f"  ❌ 错误: {len(errors)} 个")
        for err in errors[:5]:  # 只显示前5个错误
            print(f"    {err}")
        if len(errors) > 5:
            print(f"    ... 还有 {len(errors) - 5} 个错误")
    else:
        print("  ✅ 无错误")

    if warnings:
        print(f"  ⚠️  警告: {len(warnings)} 个")
        for warn in warnings[:3]:  # 只显示前3个警告
            print(f"    {warn}")
        if len(warnings) > 3:
            print(f"    ... 还有 {len(warnings) - 3} 个警告")
    else:
        print("  ✅ 无警告")

    print("\n" + "="*60)
    if not errors and not warnings:
        print("✅ 所有数据验证通过！")
    elif not errors:
        print(f"⚠️  有 {len(warnings)} 个警告，建议检查。")
    else:
        print(f"❌ 发现 {len(errors)} 个错误，{len(warnings)} 个警告。请修正后重试。")
    print("="*60)
    return 1 if errors else 0


if __name__ == "__main__":
    sys.exit(main())
