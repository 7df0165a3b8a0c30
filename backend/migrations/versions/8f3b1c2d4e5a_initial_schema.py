"""initial schema

Revision ID: 8f3b1c2d4e5a
Revises:
Create Date: 2026-10-17 00:00:00.000000
"""
import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision = '8f3b1c2d4e5a'
down_revision = None
branch_labels = None
depends_on = None

user_role = sa.Enum('client', 'coach', name='user_role')
program_type = sa.Enum('lifting', 'diet', 'posing', name='program_type')
program_status = sa.Enum('draft', 'active', 'archived', name='program_status')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade():
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('uuid', sa.String(length=36), nullable=False),
        sa.Column('username', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=True),
        sa.Column('password_hash', sa.String(length=254), nullable=False),
        sa.Column('role', user_role, server_default='client', nullable=False),
        sa.Column('full_name', sa.String(length=120), nullable=True),
        sa.Column('phone_number', sa.String(length=40), nullable=True),
        sa.Column('profile_picture_url', sa.String(length=500), nullable=True),
        sa.Column('is_public_profile', sa.Boolean(), server_default='1', nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_users'),
        sa.UniqueConstraint('uuid', name='uq_users_uuid'),
        sa.UniqueConstraint('username', name='uq_users_username'),
        sa.UniqueConstraint('email', name='uq_users_email'),
    )
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'coach_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('specialties', sa.Text(), nullable=True),
        sa.Column('certifications', sa.Text(), nullable=True),
        sa.Column('experience', sa.Text(), nullable=True),
        sa.Column('social_links', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'], name='fk_coach_profiles_user_id_users', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_coach_profiles'),
        sa.UniqueConstraint('user_id', name='uq_coach_profiles_user_id'),
    )

    op.create_table(
        'client_profiles',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('height_cm', sa.Numeric(5, 1), nullable=True),
        sa.Column('weight_kg', sa.Numeric(5, 1), nullable=True),
        sa.Column('fitness_goals', sa.Text(), nullable=True),
        sa.Column('medical_conditions', sa.Text(), nullable=True),
        sa.Column('dietary_restrictions', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['user_id'], ['users.id'], name='fk_client_profiles_user_id_users', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_client_profiles'),
        sa.UniqueConstraint('user_id', name='uq_client_profiles_user_id'),
    )

    op.create_table(
        'programs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('uuid', sa.String(length=36), nullable=False),
        sa.Column('coach_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=160), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', program_type, nullable=False),
        sa.Column('price', sa.Numeric(10, 2), server_default='0', nullable=False),
        sa.Column('is_public', sa.Boolean(), server_default='1', nullable=False),
        sa.Column('status', program_status, server_default='active', nullable=False),
        sa.Column('cycle_length', sa.Integer(), server_default='0', nullable=False),
        sa.Column('program_data', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint('price >= 0', name='ck_programs_price_non_negative'),
        sa.CheckConstraint('cycle_length >= 0', name='ck_programs_cycle_length_non_negative'),
        sa.ForeignKeyConstraint(
            ['coach_id'], ['users.id'], name='fk_programs_coach_id_users', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_programs'),
        sa.UniqueConstraint('uuid', name='uq_programs_uuid'),
    )
    op.create_index('ix_programs_coach', 'programs', ['coach_id'])
    op.create_index('ix_programs_type', 'programs', ['type'])

    op.create_table(
        'routines',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('program_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('day_of_week', sa.String(length=20), nullable=True),
        sa.Column('order_in_cycle', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['program_id'], ['programs.id'], name='fk_routines_program_id_programs', ondelete='CASCADE'
        ),
        sa.PrimaryKeyConstraint('id', name='pk_routines'),
        sa.UniqueConstraint('program_id', 'order_in_cycle', name='uq_routines_program_order'),
    )

    op.create_table(
        'program_exercises',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('routine_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=120), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('sets', sa.Integer(), nullable=False),
        sa.Column('reps', sa.String(length=40), nullable=False),
        sa.Column('rest_time', sa.String(length=40), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('order_in_routine', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint('sets >= 1', name='ck_program_exercises_sets_positive'),
        sa.ForeignKeyConstraint(
            ['routine_id'], ['routines.id'],
            name='fk_program_exercises_routine_id_routines', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_program_exercises'),
        sa.UniqueConstraint(
            'routine_id', 'order_in_routine', name='uq_program_exercises_routine_order'
        ),
    )

    op.create_table(
        'client_programs',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('client_id', sa.Integer(), nullable=False),
        sa.Column('program_id', sa.Integer(), nullable=False),
        sa.Column('active', sa.Boolean(), server_default='1', nullable=False),
        sa.Column('start_date', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('version', sa.Integer(), server_default='1', nullable=False),
        sa.Column('client_program_data', sa.JSON(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ['client_id'], ['users.id'], name='fk_client_programs_client_id_users', ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['program_id'], ['programs.id'],
            name='fk_client_programs_program_id_programs', ondelete='CASCADE',
        ),
        sa.PrimaryKeyConstraint('id', name='pk_client_programs'),
    )
    op.create_index(
        'uq_client_programs_active_enrollment',
        'client_programs',
        ['client_id', 'program_id'],
        unique=True,
        postgresql_where=sa.text('active'),
        sqlite_where=sa.text('active'),
    )
    op.create_index('ix_client_programs_program', 'client_programs', ['program_id'])

    for table in ('workout_logs', 'meal_logs'):
        columns = [
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('client_id', sa.Integer(), nullable=False),
            sa.Column('client_program_id', sa.Integer(), nullable=False),
        ]
        if table == 'workout_logs':
            columns.append(sa.Column('routine_id', sa.String(length=64), nullable=False))
        else:
            columns += [
                sa.Column(macro, sa.Integer(), server_default='0', nullable=False)
                for macro in ('calories', 'protein', 'carbs', 'fats')
            ]
        op.create_table(
            table,
            *columns,
            sa.Column('date', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
            sa.Column('data', sa.JSON(), nullable=False),
            *_timestamps(),
            sa.ForeignKeyConstraint(
                ['client_id'], ['users.id'], name=f'fk_{table}_client_id_users', ondelete='CASCADE'
            ),
            sa.ForeignKeyConstraint(
                ['client_program_id'], ['client_programs.id'],
                name=f'fk_{table}_client_program_id_client_programs', ondelete='CASCADE',
            ),
            sa.PrimaryKeyConstraint('id', name=f'pk_{table}'),
        )
        op.create_index(f'ix_{table}_client_enrollment', table, ['client_id', 'client_program_id'])

    op.create_table(
        'beta_signups',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('first_name', sa.String(length=80), nullable=False),
        sa.Column('last_name', sa.String(length=80), nullable=False),
        sa.Column('email', sa.String(length=254), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='pk_beta_signups'),
    )


def downgrade():
    op.drop_table('beta_signups')
    for table in ('meal_logs', 'workout_logs'):
        op.drop_index(f'ix_{table}_client_enrollment', table_name=table)
        op.drop_table(table)
    op.drop_index('ix_client_programs_program', table_name='client_programs')
    op.drop_index('uq_client_programs_active_enrollment', table_name='client_programs')
    op.drop_table('client_programs')
    op.drop_table('program_exercises')
    op.drop_table('routines')
    op.drop_index('ix_programs_type', table_name='programs')
    op.drop_index('ix_programs_coach', table_name='programs')
    op.drop_table('programs')
    op.drop_table('client_profiles')
    op.drop_table('coach_profiles')
    op.drop_index('ix_users_role', table_name='users')
    op.drop_table('users')

    bind = op.get_bind()
    for enum in (program_status, program_type, user_role):
        enum.drop(bind, checkfirst=True)
