"""Create application, document and bank statement tables.

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-17

These are the tables the reconciliation and OCR insight views read.
Upstream pipelines own the writes.
"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '0a1b2c3d4e5f'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    """Create reconciliation source tables."""
    op.create_table(
        'applications',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('status', sa.String(), nullable=False, server_default='draft',
                  comment='draft | submitted | in_review | funded | declined'),
        sa.Column('form_data', postgresql.JSONB(), nullable=True,
                  comment='Client form snapshot keyed by column identifier'),
        sa.Column('submitted_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()')),
        sa.Column('updated_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()')),
    )

    op.create_table(
        'documents',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('application_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_name', sa.String(), nullable=False),
        sa.Column('document_type', sa.String(), nullable=True,
                  comment='tax_returns, income_statement, balance_sheet, etc.'),
        sa.Column('storage_key', sa.String(), nullable=True),
        sa.Column('uploaded_at', sa.TIMESTAMP(timezone=True), nullable=False,
                  server_default=sa.text('NOW()')),
    )
    op.create_index('idx_documents_application_id', 'documents', ['application_id'])

    op.create_table(
        'document_fields',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('document_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('documents.id', ondelete='CASCADE'), nullable=False),
        sa.Column('label', sa.String(), nullable=False,
                  comment='Label as printed on the document'),
        sa.Column('column_key', sa.String(), nullable=True,
                  comment='Logical column the label maps to'),
        sa.Column('value', sa.Text(), nullable=True),
        sa.Column('confidence', sa.Numeric(5, 4), nullable=True,
                  comment='Extraction confidence (0.0-1.0)'),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('extracted_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()')),
    )
    op.create_index('idx_document_fields_document_id', 'document_fields', ['document_id'])

    op.create_table(
        'ocr_results',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('document_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('documents.id', ondelete='CASCADE'), nullable=False),
        sa.Column('extracted_text', sa.Text(), nullable=True),
        sa.Column('confidence', sa.Numeric(5, 4), nullable=True),
        sa.Column('created_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()')),
    )
    op.create_index('idx_ocr_results_document_id', 'ocr_results', ['document_id'])

    op.create_table(
        'bank_statement_parses',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('application_id', postgresql.UUID(as_uuid=True),
                  sa.ForeignKey('applications.id', ondelete='CASCADE'), nullable=False),
        sa.Column('bank_name', sa.String(), nullable=True),
        sa.Column('header_fields', postgresql.JSONB(), nullable=True,
                  comment='Parsed statement header, e.g. account_holder, address'),
        sa.Column('parsed_at', sa.TIMESTAMP(timezone=True), server_default=sa.text('NOW()')),
    )
    op.create_index(
        'idx_bank_statement_parses_application_id', 'bank_statement_parses', ['application_id']
    )


def downgrade() -> None:
    """Drop reconciliation source tables."""
    op.drop_index('idx_bank_statement_parses_application_id', table_name='bank_statement_parses')
    op.drop_table('bank_statement_parses')
    op.drop_index('idx_ocr_results_document_id', table_name='ocr_results')
    op.drop_table('ocr_results')
    op.drop_index('idx_document_fields_document_id', table_name='document_fields')
    op.drop_table('document_fields')
    op.drop_index('idx_documents_application_id', table_name='documents')
    op.drop_table('documents')
    op.drop_table('applications')
