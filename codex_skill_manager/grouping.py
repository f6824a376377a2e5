"""Identity resolution: reconcile same-named skills across sources.

Everything here is pure; it never touches the filesystem.
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from .models import CustomSkillPath, LocalSkillGroup, Skill
from .platforms import SkillPlatform

# Codex copies win over Claude copies when both exist.
DEFAULT_PREFERENCE = (SkillPlatform.CODEX, SkillPlatform.CLAUDE)

SIDEBAR_PREFERENCE = (
    SkillPlatform.CODEX,
    SkillPlatform.CLAUDE,
    SkillPlatform.OPENCODE,
    SkillPlatform.COPILOT,
)


def group_by_name(skills: Iterable[Skill]) -> Dict[str, List[Skill]]:
    """Partition skills by name, keeping first-seen order."""
    grouped: Dict[str, List[Skill]] = {}
    for skill in skills:
        grouped.setdefault(skill.name, []).append(skill)
    return grouped


def select_preferred(
    members: Sequence[Skill],
    preference: Sequence[SkillPlatform] = DEFAULT_PREFERENCE,
) -> Optional[Skill]:
    """Pick the representative of a same-name partition.

    The first member on the earliest preferred platform wins; with no
    preferred platform present the first member is used.
    """
    for platform in preference:
        for skill in members:
            if skill.platform == platform:
                return skill
    return members[0] if members else None


def group_local_skills(
    visible: Iterable[Skill],
    all_skills: Optional[Iterable[Skill]] = None,
    preference: Sequence[SkillPlatform] = DEFAULT_PREFERENCE,
) -> List[LocalSkillGroup]:
    """Group `visible` skills by name.

    The group's content comes from the visible members, while its id,
    installed platforms and delete ids come from `all_skills` so badges stay
    accurate when the visible list is filtered.
    """
    visible_by_name = group_by_name(visible)
    full_by_name = group_by_name(all_skills) if all_skills is not None else visible_by_name

    groups: List[LocalSkillGroup] = []
    for name, visible_members in visible_by_name.items():
        members = full_by_name.get(name) or visible_members
        selection = select_preferred(members, preference)
        if selection is None:
            continue
        content = select_preferred(visible_members, preference) or selection

        groups.append(
            LocalSkillGroup(
                id=selection.id,
                skill=content,
                installed_platforms=frozenset(
                    s.platform for s in members if s.platform is not None
                ),
                delete_ids=[s.id for s in members],
            )
        )

    groups.sort(key=lambda group: group.skill.display_name.casefold())
    return groups


def platform_groups(
    skills: Sequence[Skill],
    preference: Sequence[SkillPlatform] = SIDEBAR_PREFERENCE,
) -> List[LocalSkillGroup]:
    """Groups for skills under the recognized platform roots only.

    Custom-path copies are dropped before grouping, so a custom copy can
    never be chosen as the representative of a platform group.
    """
    platform_only = [s for s in skills if not s.is_from_custom_path]
    return group_local_skills(platform_only, platform_only, preference)


def custom_path_groups(
    skills: Sequence[Skill],
    custom_path: CustomSkillPath,
    preference: Sequence[SkillPlatform] = SIDEBAR_PREFERENCE,
) -> List[LocalSkillGroup]:
    """Groups for the skills found inside one custom path."""
    members = [
        s for s in skills
        if s.custom_path is not None and s.custom_path.id == custom_path.id
    ]
    return group_local_skills(members, members, preference)
