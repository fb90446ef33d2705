from .breakdown import (
    BestBucket,
    DayOfWeekStats,
    ProductivityInsights,
    TimeOfDayStats,
    analyze_day_of_week,
    analyze_time_of_day,
    average_daily_pomos,
    best_day,
    best_time_slot,
    consistency_score,
    generate_insights,
    time_of_day,
)
from .report import ReportStats, focus_efficiency, generate_report, work_break_ratio
from .trends import (
    ComparisonStats,
    GoalProgress,
    StreakInfo,
    calculate_goal_progress,
    calculate_streak,
    compare_periods,
)

__all__ = [
    "BestBucket", "DayOfWeekStats", "ProductivityInsights", "TimeOfDayStats",
    "analyze_day_of_week", "analyze_time_of_day", "average_daily_pomos",
    "best_day", "best_time_slot", "consistency_score", "generate_insights",
    "time_of_day", "ReportStats", "focus_efficiency", "generate_report",
    "work_break_ratio", "ComparisonStats", "GoalProgress", "StreakInfo",
    "calculate_goal_progress", "calculate_streak", "compare_periods",
]
