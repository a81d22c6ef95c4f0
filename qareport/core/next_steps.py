"""Generate ordered next-step recommendations from a rating. Pure logic, no I/O."""

from qareport.core.schemas_qa import PrioritySummary, Rating

ASSIGN_OWNERS_STEP = "👥 Assign tasks to team members with clear completion dates"
FOLLOW_UP_STEP = "🔄 Schedule follow-up QA review after fixes are implemented"
LAUNCH_READY_STEP = "🚀 Site is ready for launch - proceed with deployment plan"

POOR_RATING_STEPS = (
    "📋 Conduct comprehensive site review with development team",
    "📅 Create detailed remediation timeline with milestones",
)
FAIR_RATING_STEP = "🔍 Prioritize and assign issues to development team"


def generate_next_steps(rating: Rating, priority_summary: PrioritySummary) -> list[str]:
    """Build the recommended actions for a report.

    Order matters: readers treat the list top-down as priority, so critical
    and high tiers come first and the closing steps last.

    Args:
        rating: Overall report rating
        priority_summary: Curated issues per priority tier

    Returns:
        Ordered list of recommendation strings
    """
    rating = Rating(rating)
    steps: list[str] = []

    critical = len(priority_summary.critical)
    high = len(priority_summary.high)
    medium = len(priority_summary.medium)
    low = len(priority_summary.low)

    if critical > 0:
        steps.append(
            f"🚨 Immediately address {critical} critical issue(s) before site launch or promotion"
        )

    if high > 0:
        steps.append(f"⚠️ Schedule fixes for {high} high-priority item(s) within one week")

    if rating == Rating.POOR:
        steps.extend(POOR_RATING_STEPS)
    elif rating == Rating.FAIR:
        steps.append(FAIR_RATING_STEP)

    if medium > 0:
        steps.append(f"📌 Plan sprint for {medium} medium-priority improvement(s)")

    # Backlog items are noise while the site is rated poor
    if low > 0 and rating != Rating.POOR:
        steps.append(f"💡 Add {low} low-priority item(s) to backlog for future iterations")

    steps.append(ASSIGN_OWNERS_STEP)
    steps.append(FOLLOW_UP_STEP)

    if rating == Rating.EXCELLENT:
        steps.append(LAUNCH_READY_STEP)

    return steps
