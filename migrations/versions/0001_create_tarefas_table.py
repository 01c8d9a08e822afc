"""Create table for storing tarefas."""

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_create_tarefas'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # The app runs ``db.create_all()`` on import, so the table may already exist.
    if sa.inspect(op.get_bind()).has_table('tarefas'):
        return

    op.create_table(
        'tarefas',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('titulo', sa.String(length=200), nullable=False),
        sa.Column('descricao', sa.Text(), nullable=False),
        sa.Column('status', sa.String(length=50), nullable=False),
        sa.Column(
            'concluida',
            sa.Boolean(),
            nullable=False,
            server_default=sa.text('0'),
        ),
        sa.Column('criada_em', sa.DateTime(), nullable=False),
        sa.Column('concluida_em', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_tarefas_status', 'tarefas', ['status'])


def downgrade() -> None:
    op.drop_index('ix_tarefas_status', table_name='tarefas')
    op.drop_table('tarefas')
