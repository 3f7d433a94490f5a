"""
Example courses written to an empty record store on first use.
"""

from __future__ import annotations

from typing import List

from hrtraining.model import Course


def seed_courses() -> List[Course]:
    """
    Return a fresh copy of the three example courses (ids "1", "2", "3").
    """
    return [
        Course(
            id="1",
            name="React 基礎與實戰",
            company="神資",
            department="600-數位科技事業群",
            objective="提升前端開發能力",
            start_date="2023-11-05",
            end_date="2023-11-05",
            time="09:00-17:00",
            duration=7,
            expected_attendees=30,
            actual_attendees=28,
            instructor="張志明",
            instructor_org="前端技術學院",
            cost=15000,
            satisfaction=4.6,
            status="Completed",
            created_by="HR",
        ),
        Course(
            id="2",
            name="溝通與領導力工作坊",
            company="新達",
            department="Z10-統合通訊處",
            objective="強化中階主管管理職能",
            start_date="2023-11-15",
            end_date="2023-11-16",
            time="13:00-17:00",
            duration=8,
            expected_attendees=15,
            actual_attendees=0,
            instructor="李春嬌",
            instructor_org="企管顧問公司",
            cost=25000,
            satisfaction=0,
            status="Planned",
            created_by="HR",
        ),
        Course(
            id="3",
            name="AI 工具應用分享",
            company="神耀",
            department="QA0-智能科技中心",
            objective="學習使用 Generative AI 提升工作效率",
            start_date="2023-12-01",
            end_date="2023-12-01",
            time="12:00-13:30",
            duration=1.5,
            expected_attendees=50,
            actual_attendees=0,
            instructor="王小明",
            instructor_org="內部講師",
            cost=0,
            satisfaction=0,
            status="Planned",
            created_by="User",
        ),
    ]
