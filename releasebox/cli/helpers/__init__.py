"""CLI helper functions."""

from releasebox.cli.helpers.output import (
    print_error_message,
    print_list_item,
    print_pipeline_result,
    print_publish_result,
    print_staging_result,
    print_success_message,
    print_targets_table,
    print_warning_message,
)


__all__ = [
    "print_error_message",
    "print_list_item",
    "print_pipeline_result",
    "print_publish_result",
    "print_staging_result",
    "print_success_message",
    "print_targets_table",
    "print_warning_message",
]
