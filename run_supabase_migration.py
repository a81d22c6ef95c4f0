#!/usr/bin/env python3
"""Check the QA report tables exist; print the schema SQL if they don't."""
import sys

from qareport.db.supabase_client import get_supabase

TABLES = [
    "profiles",
    "qa_reports",
    "qa_report_revisions",
    "qa_report_comments",
    "qa_report_share_links",
]

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS profiles (
    id UUID PRIMARY KEY REFERENCES auth.users(id),
    email TEXT NOT NULL,
    full_name TEXT,
    avatar_url TEXT,
    created_at TIMESTAMPTZ DEFAULT now()
);

CREATE TABLE IF NOT EXISTS qa_reports (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    created_by UUID NOT NULL REFERENCES profiles(id),
    created_at TIMESTAMPTZ DEFAULT now(),
    updated_at TIMESTAMPTZ DEFAULT now(),
    website_name TEXT NOT NULL,
    url TEXT NOT NULL,
    date_reviewed DATE NOT NULL,
    reviewer_name TEXT NOT NULL,
    priority_level TEXT NOT NULL CHECK (priority_level IN ('low', 'medium', 'high')),
    checklist_data JSONB NOT NULL DEFAULT '[]'::jsonb,
    priority_summary JSONB NOT NULL DEFAULT '{}'::jsonb,
    overall_rating TEXT CHECK (overall_rating IN ('excellent', 'good', 'fair', 'poor')),
    next_steps JSONB NOT NULL DEFAULT '[]'::jsonb,
    status TEXT NOT NULL DEFAULT 'draft' CHECK (status IN ('draft', 'completed'))
);

CREATE TABLE IF NOT EXISTS qa_report_revisions (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    qa_report_id UUID NOT NULL REFERENCES qa_reports(id) ON DELETE CASCADE,
    revised_by UUID NOT NULL REFERENCES profiles(id),
    revised_at TIMESTAMPTZ DEFAULT now(),
    changes JSONB NOT NULL,
    revision_note TEXT
);

CREATE TABLE IF NOT EXISTS qa_report_comments (
    id UUID PRIMARY KEY DEFAULT gen_random_uuid(),
    qa_report_id UUID NOT NULL REFERENCES qa_reports(id) ON DELETE CASCADE,
    user_id UUID NOT NULL REFERENCES profiles(id),
    section_key TEXT NOT NULL,
    comment_text TEXT NOT NULL,
    created_at TIMESTAMPTZ DEFAULT now()
);

CREATE TABLE IF NOT EXISTS qa_report_share_links (
    token TEXT PRIMARY KEY,
    qa_report_id UUID NOT NULL REFERENCES qa_reports(id) ON DELETE CASCADE,
    created_by UUID NOT NULL REFERENCES profiles(id),
    created_at TIMESTAMPTZ DEFAULT now()
);
"""


def check_tables():
    supabase = get_supabase()
    missing = []

    for table in TABLES:
        print(f"🔍 Checking table {table}...")
        try:
            supabase.table(table).select("*").limit(1).execute()
        except Exception as e:
            print(f"❌ {table}: {e}")
            missing.append(table)

    if missing:
        print("💡 Run this SQL in your Supabase SQL editor, then create a public")
        print("   storage bucket named 'qa-images':")
        print(SCHEMA_SQL)
        sys.exit(1)

    print("✅ All QA report tables are present")


if __name__ == "__main__":
    check_tables()
