"""
Demo data for the Taskboard application - sales team context
Roles, users (managers referenced by username) and sample tasks
"""

import logging
from datetime import date, timedelta
from typing import Dict

from sqlalchemy.orm import Session

from taskboard.models import Role, User, UserRole, Task, TaskStatus, TaskPriority
from taskboard.utils.security import hash_password

logger = logging.getLogger(__name__)

DEMO_PASSWORD = "admin123"

DEMO_ROLES = [
    {"name": "Administrator", "description": "Full system access and user management"},
    {"name": "Sales Manager", "description": "Manage sales team and view team tasks"},
    {"name": "Sales User", "description": "Create and manage own sales tasks"},
    {"name": "Reporting User", "description": "Read-only access to reports and dashboards"},
]

# Order matters: a fresh database gives admin id 1, jsmith id 2, ... rmartinez id 8
DEMO_USERS = [
    # Administrator
    {
        "username": "admin",
        "first_name": "Admin",
        "last_name": "User",
        "email": "admin@salesdemo.com",
        "manager": None,
        "department": "IT",
        "location": "San Francisco",
        "roles": ["Administrator"],
    },
    # Sales Managers
    {
        "username": "jsmith",
        "first_name": "John",
        "last_name": "Smith",
        "email": "john.smith@salesdemo.com",
        "manager": None,
        "department": "Sales",
        "location": "New York",
        "roles": ["Sales Manager"],
    },
    {
        "username": "sjohnson",
        "first_name": "Sarah",
        "last_name": "Johnson",
        "email": "sarah.johnson@salesdemo.com",
        "manager": None,
        "department": "Sales",
        "location": "Chicago",
        "roles": ["Sales Manager"],
    },
    # Sales Users
    {
        "username": "mwilliams",
        "first_name": "Michael",
        "last_name": "Williams",
        "email": "michael.williams@salesdemo.com",
        "manager": "jsmith",
        "department": "Sales",
        "location": "New York",
        "roles": ["Sales User"],
    },
    {
        "username": "ebrown",
        "first_name": "Emily",
        "last_name": "Brown",
        "email": "emily.brown@salesdemo.com",
        "manager": "jsmith",
        "department": "Sales",
        "location": "New York",
        "roles": ["Sales User"],
    },
    {
        "username": "djones",
        "first_name": "David",
        "last_name": "Jones",
        "email": "david.jones@salesdemo.com",
        "manager": "sjohnson",
        "department": "Sales",
        "location": "Chicago",
        "roles": ["Sales User"],
    },
    {
        "username": "lgarcia",
        "first_name": "Lisa",
        "last_name": "Garcia",
        "email": "lisa.garcia@salesdemo.com",
        "manager": "sjohnson",
        "department": "Sales",
        "location": "Chicago",
        "roles": ["Sales User"],
    },
    # Reporting User
    {
        "username": "rmartinez",
        "first_name": "Robert",
        "last_name": "Martinez",
        "email": "robert.martinez@salesdemo.com",
        "manager": "admin",
        "department": "Analytics",
        "location": "San Francisco",
        "roles": ["Reporting User"],
    },
]

# due_in_days is relative to the seeding date
DEMO_TASKS = [
    {"title": "Follow up with Acme Corp", "description": "Schedule a follow-up call to discuss the Q2 proposal",
     "type": "Follow-up", "status": "open", "priority": "high", "assigned_to": "mwilliams", "created_by": "jsmith", "due_in_days": 3},
    {"title": "Prepare Q1 sales report", "description": "Compile all Q1 sales data and prepare presentation for management",
     "type": "Reporting", "status": "in_progress", "priority": "high", "assigned_to": "ebrown", "created_by": "jsmith", "due_in_days": 5},
    {"title": "Cold call new prospects", "description": "Reach out to 20 new prospects from the marketing qualified leads list",
     "type": "Prospecting", "status": "open", "priority": "medium", "assigned_to": "mwilliams", "created_by": "mwilliams", "due_in_days": 7},
    {"title": "Update CRM records", "description": "Update contact information for all accounts in the Chicago region",
     "type": "Administrative", "status": "in_progress", "priority": "low", "assigned_to": "djones", "created_by": "sjohnson", "due_in_days": 10},
    {"title": "Demo for TechStart Inc", "description": "Conduct product demo for TechStart Inc stakeholders",
     "type": "Demo", "status": "completed", "priority": "high", "assigned_to": "lgarcia", "created_by": "sjohnson", "due_in_days": -2},
    {"title": "Negotiate contract terms", "description": "Work with legal to finalize contract terms for Global Systems deal",
     "type": "Negotiation", "status": "in_progress", "priority": "high", "assigned_to": "ebrown", "created_by": "jsmith", "due_in_days": 4},
    {"title": "Attend sales training", "description": "Complete the new product features training module",
     "type": "Training", "status": "open", "priority": "medium", "assigned_to": "djones", "created_by": "sjohnson", "due_in_days": 14},
    {"title": "Client visit preparation", "description": "Prepare materials and agenda for on-site client visit next week",
     "type": "Meeting Prep", "status": "open", "priority": "high", "assigned_to": "lgarcia", "created_by": "lgarcia", "due_in_days": 6},
    {"title": "Renewal discussion", "description": "Contact Beta Solutions about their annual contract renewal",
     "type": "Renewal", "status": "open", "priority": "medium", "assigned_to": "mwilliams", "created_by": "jsmith", "due_in_days": 15},
    {"title": "Territory analysis", "description": "Analyze sales performance across all territories for strategy meeting",
     "type": "Analysis", "status": "completed", "priority": "medium", "assigned_to": "sjohnson", "created_by": "admin", "due_in_days": -5},
    {"title": "Lead qualification", "description": "Qualify and score the new leads from last weeks webinar",
     "type": "Prospecting", "status": "in_progress", "priority": "medium", "assigned_to": "djones", "created_by": "djones", "due_in_days": 2},
    {"title": "Competitor research", "description": "Research new competitor offerings and update competitive analysis",
     "type": "Research", "status": "open", "priority": "low", "assigned_to": "ebrown", "created_by": "jsmith", "due_in_days": 20},
    {"title": "Customer feedback review", "description": "Review customer feedback from Q4 and identify improvement areas",
     "type": "Review", "status": "completed", "priority": "medium", "assigned_to": "lgarcia", "created_by": "sjohnson", "due_in_days": -3},
    {"title": "Pipeline review meeting", "description": "Prepare for monthly pipeline review with sales leadership",
     "type": "Meeting Prep", "status": "open", "priority": "high", "assigned_to": "jsmith", "created_by": "admin", "due_in_days": 1},
    {"title": "Sales enablement materials", "description": "Create new sales enablement materials for product launch",
     "type": "Content Creation", "status": "in_progress", "priority": "medium", "assigned_to": "mwilliams", "created_by": "jsmith", "due_in_days": 8},
]


def seed_roles(db: Session) -> Dict[str, int]:
    """Create the role catalog; existing roles are reused"""
    role_ids = {}
    for role_data in DEMO_ROLES:
        role = db.query(Role).filter(Role.name == role_data["name"]).first()
        if role is None:
            role = Role(name=role_data["name"], description=role_data["description"])
            db.add(role)
            db.flush()
        role_ids[role.name] = role.id
    db.commit()
    return role_ids


def seed_demo_data(db: Session, password: str = DEMO_PASSWORD, with_tasks: bool = True) -> Dict[str, int]:
    """Seed roles, users and tasks; returns username -> user id"""
    role_ids = seed_roles(db)
    # one hash shared by every demo account
    hashed = hash_password(password)

    user_ids = {}
    for user_data in DEMO_USERS:
        existing = db.query(User).filter(User.username == user_data["username"]).first()
        if existing:
            logger.info("User %s already exists, skipping", user_data["username"])
            user_ids[existing.username] = existing.id
            continue

        user = User(
            username=user_data["username"],
            hashed_password=hashed,
            first_name=user_data["first_name"],
            last_name=user_data["last_name"],
            email=user_data["email"],
            manager_id=user_ids.get(user_data["manager"]),
            department=user_data["department"],
            location=user_data["location"],
            status="active",
        )
        db.add(user)
        db.flush()
        for role_name in user_data["roles"]:
            db.add(UserRole(user_id=user.id, role_id=role_ids[role_name]))
        user_ids[user.username] = user.id
    db.commit()

    if with_tasks and db.query(Task).count() == 0:
        today = date.today()
        for task_data in DEMO_TASKS:
            db.add(Task(
                title=task_data["title"],
                description=task_data["description"],
                type=task_data["type"],
                status=TaskStatus(task_data["status"]),
                priority=TaskPriority(task_data["priority"]),
                assigned_to=user_ids[task_data["assigned_to"]],
                created_by=user_ids[task_data["created_by"]],
                due_date=today + timedelta(days=task_data["due_in_days"]),
            ))
        db.commit()

    logger.info("Demo data seeded: %s roles, %s users", len(role_ids), len(user_ids))
    return user_ids
