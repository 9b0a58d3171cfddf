import django.core.validators
from django.db import migrations, models
import uuid


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name='Selection',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('user_id', models.CharField(db_index=True, help_text='Identifier of the administrator who made the pick', max_length=255)),
                ('candidate_name', models.CharField(help_text='Candidate name, must match a roster entry', max_length=200, validators=[django.core.validators.MaxLengthValidator(200)])),
                ('list_name', models.CharField(choices=[('List A', 'List A'), ('List B', 'List B')], help_text='Roster the candidate was picked from', max_length=10)),
                ('selection_order', models.PositiveSmallIntegerField(help_text='Priority rank within the save (1-9)', validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(9)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
            ],
            options={
                'ordering': ['-created_at', 'selection_order'],
                'indexes': [models.Index(fields=['user_id', 'created_at'], name='selection_user_created_idx')],
                'constraints': [models.CheckConstraint(condition=models.Q(('selection_order__gte', 1), ('selection_order__lte', 9)), name='selection_order_between_1_and_9')],
            },
        ),
    ]
