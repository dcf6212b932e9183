"""
Demo Data Seeder

Creates a demo organization with an owner, a member, one department and a
fully written A3 so the UI and the PDF export have something to show.
Safe to run repeatedly: existing users, organization, department and A3
are reused. Run after migrations with: python -m leancoach.migrations.seed
"""
import asyncio
import asyncpg
import sys

from ..models import DepartmentRole, SectionType
from ..services.engine_service import EngineService

DEMO_ORG_NAME = "Lean Coach Demo"
DEMO_ORG_SLUG = "lean-coach-demo"
DEMO_DEPARTMENT = "Production"

OWNER = {"name": "Demo Owner", "email": "owner@leancoach.nl", "password": "OwnerPassword123!"}
MEMBER = {"name": "Demo User", "email": "demo@leancoach.nl", "password": "DemoPassword123!"}

DEMO_A3_TITLE = "Reduce scrap on line 3"
DEMO_A3_DESCRIPTION = "Visual test document with every section filled in"

DEMO_SECTIONS = {
    SectionType.PROJECT_INFO: (
        "Owner: Demo User\nCoach: Demo Owner\nTeam: line 3 operators, quality, maintenance\n"
        "Start: week 10, review every Friday"
    ),
    SectionType.BACKGROUND: (
        "Line 3 produces housings for the main customer. Scrap has doubled in six months "
        "and now costs about 40k euro a month."
    ),
    SectionType.CURRENT_STATE: (
        "Scrap rate 4.2% (target 1%).\nMost rejects are short shots on the night shift.\n"
        "Mould temperature is logged but not checked at shift start."
    ),
    SectionType.GOALS: "Scrap below 1% by the end of Q3 without extra inspection staff.",
    SectionType.ROOT_CAUSE: (
        "5 Whys: short shots -> mould too cold -> heater zone 2 drifts -> thermocouple worn -> "
        "no preventive replacement interval."
    ),
    SectionType.COUNTERMEASURES: (
        "Replace thermocouples on a fixed interval.\nAdd mould temperature to the shift start checklist.\n"
        "Alarm on zone 2 drift above 5 degrees."
    ),
    SectionType.IMPLEMENTATION: (
        "Week 12: replace thermocouples (maintenance)\nWeek 13: update checklist (team lead)\n"
        "Week 14: configure alarm (automation)"
    ),
    SectionType.FOLLOW_UP: "Daily scrap chart at the line board. Monthly review with the plant manager.",
}


async def _get_or_create_user(engine: EngineService, data: dict, org_id=None):
    user = await engine.users_service.get_user_by_email(data["email"])
    if user:
        print(f"  = user {user.email} exists")
        return user, False

    if org_id is None:
        user = await engine.users_service.register(data["name"], data["email"], data["password"])
    else:
        user = await engine.users_service.create_user(org_id, data["name"], data["email"], data["password"])
    print(f"  + user {user.email}")
    return user, True


async def seed_demo(engine: EngineService) -> dict:
    """
    Create (or reuse) the demo records.

    Returns:
        Dict with the organization, users, department and document, plus the
        names of the records created on this run.

    Raises:
        ValueError: If the demo owner already belongs to another organization
    """
    created = []

    owner, is_new = await _get_or_create_user(engine, OWNER)
    if is_new:
        created.append("owner")

    org = await engine.org_service.get_organization_by_slug(DEMO_ORG_SLUG)
    if org:
        print(f"  = organization {org.slug} exists")
    else:
        org = await engine.org_service.create_organization(owner, DEMO_ORG_NAME, slug=DEMO_ORG_SLUG)
        created.append("organization")
        print(f"  + organization {org.slug}")

    member, is_new = await _get_or_create_user(engine, MEMBER, org_id=org.id)
    if is_new:
        created.append("member")

    departments = await engine.department_service.list_departments(org.id)
    department = next((d for d in departments if d.name.lower() == DEMO_DEPARTMENT.lower()), None)
    if department:
        print(f"  = department {department.name} exists")
    else:
        department = await engine.department_service.create_department(org.id, DEMO_DEPARTMENT)
        created.append("department")
        print(f"  + department {department.name}")

    if not await engine.department_service.get_membership(department.id, member.id):
        await engine.department_service.set_member(department, member.id, DepartmentRole.MEMBER)
        created.append("membership")
        print(f"  + {member.email} joined {department.name}")

    documents = await engine.a3_service.list_documents(owner)
    document = next((d for d in documents if d.title == DEMO_A3_TITLE), None)
    if document:
        print(f"  = A3 '{document.title}' exists")
    else:
        document = await engine.a3_service.create_document(
            member, department.id, DEMO_A3_TITLE, description=DEMO_A3_DESCRIPTION
        )
        for section_type, content in DEMO_SECTIONS.items():
            await engine.a3_service.update_section(document, member, section_type, content)
        created.append("a3")
        print(f"  + A3 '{document.title}' with {len(DEMO_SECTIONS)} sections")

    return {
        "organization": org,
        "owner": owner,
        "member": member,
        "department": department,
        "document": document,
        "created": created,
    }


async def run_seed():
    """Seed demo data through the regular services"""
    engine = EngineService()

    print("Connecting to database...")
    try:
        await engine.initialize()
    except (OSError, asyncpg.PostgresError) as e:
        print(f"Connection failed: {e}")
        sys.exit(1)

    try:
        print("Seeding demo data...")
        result = await seed_demo(engine)
    except ValueError as e:
        print(f"Seeding failed: {e}")
        sys.exit(1)
    finally:
        await engine.close()

    print(f"\nSeed complete ({', '.join(result['created']) or 'nothing new'})")
    print(f"  Owner:  {OWNER['email']} / {OWNER['password']}")
    print(f"  Member: {MEMBER['email']} / {MEMBER['password']}")


def main():
    asyncio.run(run_seed())


if __name__ == "__main__":
    main()
