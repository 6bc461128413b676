# ui/views/projects.py
"""Projects repository: tech stack, credentials, domain / hosting renewals."""

from __future__ import annotations

from typing import Dict, Optional

import pandas as pd
import streamlit as st

from core.app_context import AppContext
from core.models import Project, ProjectCreate, ProjectStatus, ProjectUpdate
from ui.components.feedback import handle_write
from ui.components.selection import RecordChoices, select_record

STATUSES = [s.value for s in ProjectStatus]


def describe_project(project: Project) -> str:
    return f"{project.name} ({project.status.value})"


def _parse_credentials(text: str) -> Optional[Dict[str, str]]:
    """`key=value` per line -> dict; blank lines ignored."""
    pairs = {}
    for line in text.splitlines():
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        if key.strip():
            pairs[key.strip()] = value.strip()
    return pairs or None


def render(ctx: AppContext, projects: list[Project]) -> None:
    st.title("📁 Projects")

    with st.expander("➕ New Project", expanded=not projects):
        with st.form("new_project", clear_on_submit=False):
            name = st.text_input("Name")
            description = st.text_area("Description", height=80)
            c1, c2 = st.columns(2)
            status = c1.selectbox("Status", STATUSES)
            stack = c2.text_input("Tech Stack (comma-separated)", placeholder="React, Supabase")
            c3, c4 = st.columns(2)
            domain = c3.text_input("Domain Name")
            hosting = c4.text_input("Hosting Provider")
            domain_expiry = c3.date_input("Domain Expiry", value=None)
            hosting_renewal = c4.date_input("Hosting Renewal", value=None)
            credentials = st.text_area("Credentials (key=value per line)", height=80)
            submitted = st.form_submit_button("Save Project")

        if submitted:
            if not name:
                st.error("Project name is required.")
            else:
                record = ProjectCreate(
                    name=name.strip(),
                    description=description,
                    status=ProjectStatus(status),
                    tech_stack=[s.strip() for s in stack.split(",") if s.strip()],
                    credentials=_parse_credentials(credentials),
                    domain_name=domain or None,
                    domain_expiry=domain_expiry,
                    hosting_provider=hosting or None,
                    hosting_renewal=hosting_renewal,
                )
                handle_write(ctx, ctx.projects.add(record), f"Project {name} saved.")

    if not projects:
        st.info("No projects yet.")
        return

    st.dataframe(
        pd.DataFrame(
            [
                {
                    "Name": p.name,
                    "Status": p.status.value,
                    "Stack": ", ".join(p.tech_stack),
                    "Domain": p.domain_name,
                    "Domain Expiry": p.domain_expiry,
                    "Hosting": p.hosting_provider,
                    "Hosting Renewal": p.hosting_renewal,
                }
                for p in projects
            ]
        ),
        width="stretch",
        hide_index=True,
    )

    st.subheader("Manage")
    choices = RecordChoices(projects, describe_project)
    selected = choices.get(select_record("Project", choices))

    if selected.credentials:
        with st.expander("🔐 Credentials"):
            for key, value in selected.credentials.items():
                st.text_input(key, value=value, type="password", disabled=True, key=f"cred_{selected.id}_{key}")

    with st.form(f"edit_project_{selected.id}", clear_on_submit=False):
        status = st.selectbox("Status", STATUSES, index=STATUSES.index(selected.status.value))
        description = st.text_area("Description", value=selected.description, height=80)
        c1, c2 = st.columns(2)
        domain_expiry = c1.date_input("Domain Expiry", value=selected.domain_expiry)
        hosting_renewal = c2.date_input("Hosting Renewal", value=selected.hosting_renewal)
        if st.form_submit_button("Update Project"):
            changes = ProjectUpdate(
                status=ProjectStatus(status),
                description=description,
                domain_expiry=domain_expiry,
                hosting_renewal=hosting_renewal,
            )
            handle_write(ctx, ctx.projects.update(selected.id, changes), f"{selected.name} updated.")

    if st.button("🗑️ Delete Project"):
        handle_write(ctx, ctx.projects.delete(selected.id), f"{selected.name} deleted.")
