"""create gigpack tables

Revision ID: a1c3e5f70b21
Revises:
Create Date: 2026-10-19 10:12:41.318207

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = 'a1c3e5f70b21'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table('profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('profiles', schema=None) as batch_op:
        batch_op.create_index('ix_profiles_name', ['name'], unique=False)

    op.create_table('musician_contacts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('musician_contacts', schema=None) as batch_op:
        batch_op.create_index('ix_musician_contacts_owner_id', ['owner_id'], unique=False)

    op.create_table('gigs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=True),
        sa.Column('band_name', sa.String(length=200), nullable=True),
        sa.Column('gig_type', sa.String(length=50), nullable=True),
        sa.Column('date', sa.Date(), nullable=True),
        sa.Column('call_time', sa.String(length=5), nullable=True),
        sa.Column('on_stage_time', sa.String(length=5), nullable=True),
        sa.Column('start_time', sa.Time(), nullable=True),
        sa.Column('end_time', sa.Time(), nullable=True),
        sa.Column('venue_name', sa.String(length=200), nullable=True),
        sa.Column('venue_address', sa.String(length=300), nullable=True),
        sa.Column('location_name', sa.String(length=200), nullable=True),
        sa.Column('location_address', sa.String(length=300), nullable=True),
        sa.Column('venue_maps_url', sa.String(length=500), nullable=True),
        sa.Column('hero_image_url', sa.String(length=500), nullable=True),
        sa.Column('cover_image_path', sa.String(length=500), nullable=True),
        sa.Column('band_logo_url', sa.String(length=500), nullable=True),
        sa.Column('accent_color', sa.String(length=20), nullable=True),
        sa.Column('theme', sa.String(length=30), nullable=True),
        sa.Column('poster_skin', sa.String(length=20), nullable=True),
        sa.Column('dress_code', sa.Text(), nullable=True),
        sa.Column('backline_notes', sa.Text(), nullable=True),
        sa.Column('parking_notes', sa.Text(), nullable=True),
        sa.Column('payment_notes', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('internal_notes', sa.Text(), nullable=True),
        sa.Column('setlist', sa.Text(), nullable=True),
        sa.Column('setlist_pdf_url', sa.String(length=500), nullable=True),
        sa.Column('is_external', sa.Boolean(), nullable=False),
        sa.Column('external_event_url', sa.String(length=500), nullable=True),
        sa.Column('schedule_notes', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['owner_id'], ['profiles.id']),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('gigs', schema=None) as batch_op:
        batch_op.create_index('ix_gigs_owner_id', ['owner_id'], unique=False)
        batch_op.create_index('ix_gigs_date', ['date'], unique=False)

    op.create_table('gig_schedule_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gig_id', sa.Integer(), nullable=False),
        sa.Column('time', sa.String(length=5), nullable=True),
        sa.Column('label', sa.String(length=200), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('gig_materials',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gig_id', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(length=200), nullable=False),
        sa.Column('url', sa.String(length=1000), nullable=False),
        sa.Column('kind', sa.Enum('rehearsal', 'performance', 'charts', 'reference', 'other', name='materialkind'), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('gig_packing_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gig_id', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(length=200), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_table('gig_contacts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gig_id', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(length=100), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=200), nullable=True),
        sa.Column('source_type', sa.Enum('manual', 'lineup', 'contact', name='contactsourcetype'), nullable=False),
        sa.Column('source_id', sa.String(length=64), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    for table in ('gig_schedule_items', 'gig_materials', 'gig_packing_items', 'gig_contacts'):
        with op.batch_alter_table(table, schema=None) as batch_op:
            batch_op.create_index(f'ix_{table}_gig_id', ['gig_id'], unique=False)

    op.create_table('gig_roles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gig_id', sa.Integer(), nullable=False),
        sa.Column('role_name', sa.String(length=100), nullable=True),
        sa.Column('musician_name', sa.String(length=200), nullable=True),
        sa.Column('musician_id', sa.Integer(), nullable=True),
        sa.Column('contact_id', sa.Integer(), nullable=True),
        sa.Column('invitation_status', sa.Enum('pending', 'invited', 'accepted', 'declined', 'needs_sub', 'replaced', name='invitationstatus'), nullable=False),
        sa.Column('agreed_fee', sa.Numeric(precision=10, scale=2), nullable=True),
        sa.Column('currency', sa.String(length=3), nullable=True),
        sa.Column('payment_status', sa.Enum('unpaid', 'paid', name='rolepaymentstatus'), nullable=False),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['musician_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['contact_id'], ['musician_contacts.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('gig_roles', schema=None) as batch_op:
        batch_op.create_index('ix_gig_roles_gig_id', ['gig_id'], unique=False)
        batch_op.create_index('ix_gig_roles_musician_id', ['musician_id'], unique=False)
        batch_op.create_index('ix_gig_roles_invitation_status', ['invitation_status'], unique=False)

    op.create_table('setlist_sections',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gig_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('setlist_sections', schema=None) as batch_op:
        batch_op.create_index('ix_setlist_sections_gig_id', ['gig_id'], unique=False)

    op.create_table('setlist_items',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('section_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('artist', sa.String(length=200), nullable=True),
        sa.Column('key', sa.String(length=20), nullable=True),
        sa.Column('tempo', sa.String(length=30), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('reference_url', sa.String(length=1000), nullable=True),
        sa.Column('sort_order', sa.Integer(), nullable=True),
        sa.ForeignKeyConstraint(['section_id'], ['setlist_sections.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('setlist_items', schema=None) as batch_op:
        batch_op.create_index('ix_setlist_items_section_id', ['section_id'], unique=False)

    op.create_table('gig_shares',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gig_id', sa.Integer(), nullable=False),
        sa.Column('token', sa.String(length=64), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('expires_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('gig_shares', schema=None) as batch_op:
        batch_op.create_index('ix_gig_shares_gig_id', ['gig_id'], unique=False)
        batch_op.create_index('ix_gig_shares_token', ['token'], unique=True)

    op.create_table('gig_activity_log',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('gig_id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('activity_type', sa.String(length=50), nullable=False),
        sa.Column('description', sa.String(length=500), nullable=False),
        sa.Column('metadata', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['gig_id'], ['gigs.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['user_id'], ['profiles.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    with op.batch_alter_table('gig_activity_log', schema=None) as batch_op:
        batch_op.create_index('ix_gig_activity_log_gig_id', ['gig_id'], unique=False)
        batch_op.create_index('ix_gig_activity_log_activity_type', ['activity_type'], unique=False)
        batch_op.create_index('ix_gig_activity_log_created_at', ['created_at'], unique=False)


def downgrade():
    op.drop_table('gig_activity_log')
    op.drop_table('gig_shares')
    op.drop_table('setlist_items')
    op.drop_table('setlist_sections')
    op.drop_table('gig_roles')
    op.drop_table('gig_contacts')
    op.drop_table('gig_packing_items')
    op.drop_table('gig_materials')
    op.drop_table('gig_schedule_items')
    op.drop_table('gigs')
    op.drop_table('musician_contacts')
    op.drop_table('profiles')
    sa.Enum(name='rolepaymentstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='invitationstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='contactsourcetype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='materialkind').drop(op.get_bind(), checkfirst=True)
